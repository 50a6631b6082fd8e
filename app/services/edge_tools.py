"""Edge Function tool handlers.

Every handler takes the raw argument dict of one tool call and returns a plain
envelope: ``{"success": True, ...}`` or ``{"success": False, "error": ..., "kind": ...}``.
Nothing raises past this module.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from app.adapters.base import NO_BODY, FunctionsBackend
from app.schemas.common import ErrorKind, OperationResult
from app.schemas.function import FunctionCreate, FunctionDelete, FunctionInvoke, InvokeResult
from app.schemas.secret import SecretDelete, SecretSet
from app.services.function_service import FunctionStore
from app.services.secret_service import SecretStore

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "Invalid arguments: " + "; ".join(parts)


def tool_handler(name: str):
    """Turn a handler returning an ``OperationResult`` into an envelope-returning one."""

    def decorator(func: Callable[..., Awaitable[OperationResult]]):
        @functools.wraps(func)
        async def wrapper(self: EdgeFunctionTools, args: dict[str, Any] | None = None) -> Envelope:
            try:
                result = await func(self, args or {})
            except ValidationError as exc:
                return OperationResult.fail(
                    ErrorKind.INVALID_ARGUMENTS, _validation_message(exc)
                ).envelope()
            except OSError as exc:
                logger.exception("I/O failure in %s", name)
                return OperationResult.fail(ErrorKind.IO_FAILURE, str(exc)).envelope()
            except Exception as exc:
                logger.exception("Unexpected failure in %s", name)
                return OperationResult.fail(ErrorKind.UNEXPECTED, str(exc)).envelope()
            if not result.success:
                logger.warning("%s failed (%s): %s", name, result.kind, result.error)
            return result.envelope()

        return wrapper

    return decorator


class EdgeFunctionTools:
    """Facade over the function store, secret store and invocation backend."""

    def __init__(
        self,
        functions: FunctionStore,
        secrets: SecretStore,
        backend: FunctionsBackend,
    ) -> None:
        self.functions = functions
        self.secrets = secrets
        self.backend = backend

    # ── Functions ────────────────────────────────────────────────────

    @tool_handler("create_edge_function")
    async def create_edge_function(self, args: dict[str, Any]) -> OperationResult:
        data = FunctionCreate.model_validate(args)
        return await self.functions.deploy(
            data.name, data.source, import_map=data.import_map, verify_jwt=data.verify_jwt,
        )

    @tool_handler("list_edge_functions")
    async def list_edge_functions(self, args: dict[str, Any]) -> OperationResult:
        return await self.functions.list()

    @tool_handler("delete_edge_function")
    async def delete_edge_function(self, args: dict[str, Any]) -> OperationResult:
        data = FunctionDelete.model_validate(args)
        return await self.functions.delete(data.name)

    @tool_handler("invoke_edge_function")
    async def invoke_edge_function(self, args: dict[str, Any]) -> OperationResult:
        data = FunctionInvoke.model_validate(args)
        body = data.payload if "payload" in data.model_fields_set else NO_BODY
        outcome = await self.backend.invoke(data.name, body=body, headers=data.headers)
        if not outcome.ok:
            return InvokeResult.fail(ErrorKind.INVOKE_FAILURE, outcome.error)

        logger.info("Edge Function '%s' invoked successfully", data.name)
        return InvokeResult(
            message=f"Edge Function '{data.name}' invoked successfully",
            result=outcome.data,
            status=outcome.status,
        )

    # ── Secrets ──────────────────────────────────────────────────────

    @tool_handler("set_secret")
    async def set_secret(self, args: dict[str, Any]) -> OperationResult:
        data = SecretSet.model_validate(args)
        return await self.secrets.set(data.key, data.value)

    @tool_handler("delete_secret")
    async def delete_secret(self, args: dict[str, Any]) -> OperationResult:
        data = SecretDelete.model_validate(args)
        return await self.secrets.delete(data.key)

    @tool_handler("list_secrets")
    async def list_secrets(self, args: dict[str, Any]) -> OperationResult:
        return await self.secrets.list()

    # ── Routing ──────────────────────────────────────────────────────

    TOOL_NAMES = (
        "create_edge_function",
        "list_edge_functions",
        "delete_edge_function",
        "invoke_edge_function",
        "set_secret",
        "delete_secret",
        "list_secrets",
    )

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> Envelope:
        """Route a tool call by name."""
        if name not in self.TOOL_NAMES:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENTS, f"Unknown tool: {name}").envelope()
        logger.info("Running tool: %s", name)
        return await getattr(self, name)(arguments)
