"""Supabase Edge Functions HTTP adapter.

Invokes ``POST {url}/functions/v1/{name}`` through the Kong gateway with the
service-role key, mirroring supabase-js ``functions.invoke`` error semantics:

  - transport failure        → "Failed to send a request to the Edge Function"
  - ``x-relay-error: true``  → "Relay Error invoking the Edge Function"
  - non-2xx status           → "Edge Function returned a non-2xx status code"
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.adapters.base import NO_BODY, FunctionsBackend, InvokeOutcome

logger = logging.getLogger(__name__)


def _decode(response: httpx.Response) -> Any:
    """Decode a response body by content type (JSON or text)."""
    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    if not response.content:
        return None
    if content_type == "application/json":
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class SupabaseFunctionsClient(FunctionsBackend):
    """Calls deployed Edge Functions over HTTP with ``httpx.AsyncClient``."""

    def __init__(
        self,
        functions_url: str,
        api_key: str = "",
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {}
        if api_key:
            headers = {"Authorization": f"Bearer {api_key}", "apikey": api_key}
        self._client = httpx.AsyncClient(
            base_url=functions_url.rstrip("/") + "/",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def invoke(
        self,
        name: str,
        *,
        body: Any = NO_BODY,
        headers: dict[str, str] | None = None,
    ) -> InvokeOutcome:
        kwargs: dict[str, Any] = {"headers": dict(headers or {})}
        if body is not NO_BODY:
            if isinstance(body, str):
                kwargs["content"] = body.encode()
                kwargs["headers"].setdefault("Content-Type", "text/plain")
            else:
                kwargs["json"] = body

        try:
            response = await self._client.post(quote(name, safe=""), **kwargs)
        except httpx.RequestError as exc:
            logger.warning("Edge Function '%s' unreachable: %s", name, exc)
            return InvokeOutcome(error=f"Failed to send a request to the Edge Function: {exc}")

        if response.headers.get("x-relay-error") == "true":
            return InvokeOutcome(
                error=f"Relay Error invoking the Edge Function: {response.text}",
                status=response.status_code,
            )
        if not response.is_success:
            detail = response.text.strip()
            message = f"Edge Function returned a non-2xx status code ({response.status_code})"
            if detail:
                message = f"{message}: {detail}"
            return InvokeOutcome(error=message, status=response.status_code)

        return InvokeOutcome(data=_decode(response), status=response.status_code)

    async def aclose(self) -> None:
        await self._client.aclose()
