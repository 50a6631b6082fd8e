"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.adapters.supabase import SupabaseFunctionsClient
from app.dependencies import get_edge_tools
from app.main import app
from app.services.edge_tools import EdgeFunctionTools
from app.services.function_service import FunctionStore
from app.services.runtime_controller import RuntimeController
from app.services.secret_service import SecretStore


class FakeRuntime(RuntimeController):
    """Records restarts instead of running docker."""

    def __init__(self, succeed: bool = True) -> None:
        super().__init__("docker restart supabase-edge-functions")
        self.succeed = succeed
        self.restarts = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def restart(self) -> bool:
        self.restarts += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)  # let other callers run meanwhile
        finally:
            self.in_flight -= 1
        return self.succeed


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Mock Edge Runtime: echoes the path, headers and JSON body back."""
    name = request.url.path.rsplit("/", 1)[-1]
    if name == "missing":
        return httpx.Response(404, json={"error": "Function not found"})
    if name == "relay":
        return httpx.Response(500, headers={"x-relay-error": "true"}, text="boot failure")
    if name == "plain":
        return httpx.Response(200, text="hello")
    body = json.loads(request.content) if request.content else None
    return httpx.Response(
        200,
        json={
            "function": name,
            "body": body,
            "authorization": request.headers.get("authorization"),
            "x-custom": request.headers.get("x-custom"),
        },
    )


@pytest.fixture
def functions_dir(tmp_path: Path) -> Path:
    """An empty functions volume."""
    root = tmp_path / "functions"
    root.mkdir()
    return root


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def function_store(functions_dir: Path) -> FunctionStore:
    return FunctionStore(functions_dir)


@pytest.fixture
def secret_store(functions_dir: Path, runtime: FakeRuntime) -> SecretStore:
    return SecretStore(functions_dir, runtime)


@pytest.fixture
def backend_factory() -> Callable[..., SupabaseFunctionsClient]:
    def make(handler=echo_handler) -> SupabaseFunctionsClient:
        return SupabaseFunctionsClient(
            "http://kong:8000/functions/v1",
            "service-role-key",
            transport=httpx.MockTransport(handler),
        )

    return make


@pytest.fixture
def tools(
    function_store: FunctionStore,
    secret_store: SecretStore,
    backend_factory: Callable[..., SupabaseFunctionsClient],
) -> EdgeFunctionTools:
    return EdgeFunctionTools(function_store, secret_store, backend_factory())


@pytest_asyncio.fixture
async def client(tools: EdgeFunctionTools) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_edge_tools] = lambda: tools
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
