"""HTTP API tests."""

from pathlib import Path

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_functions_empty(client: AsyncClient):
    resp = await client.get("/api/functions/")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "functions": []}


@pytest.mark.asyncio
async def test_deploy_list_delete_function(client: AsyncClient, functions_dir: Path):
    payload = {"name": "hello-world", "source": "Deno.serve(() => new Response('hi'))", "verifyJWT": False}
    resp = await client.post("/api/functions/", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["verifyJWT"] is False
    assert (functions_dir / "hello-world" / "index.ts").exists()

    resp = await client.get("/api/functions/")
    assert [f["name"] for f in resp.json()["functions"]] == ["hello-world"]

    resp = await client.delete("/api/functions/hello-world")
    assert resp.json()["success"] is True

    resp = await client.delete("/api/functions/hello-world")
    assert resp.status_code == 200
    assert resp.json()["kind"] == "not_found"


@pytest.mark.asyncio
async def test_invoke_function(client: AsyncClient):
    resp = await client.post("/api/functions/hello/invoke", json={"payload": {"a": 1}})
    assert resp.status_code == 200
    assert resp.json()["result"]["body"] == {"a": 1}


@pytest.mark.asyncio
async def test_secrets_crud(client: AsyncClient, runtime):
    resp = await client.put("/api/secrets/", json={"key": "STRIPE_SECRET_KEY", "value": "sk_live_abcdef"})
    assert resp.status_code == 200
    assert resp.json()["created"] is True
    assert runtime.restarts == 1

    resp = await client.get("/api/secrets/")
    [entry] = resp.json()["secrets"]
    assert entry == {"key": "STRIPE_SECRET_KEY", "maskedValue": "sk_" + "•" * 11, "length": 14}

    resp = await client.delete("/api/secrets/STRIPE_SECRET_KEY")
    assert resp.json()["success"] is True
    assert runtime.restarts == 2


@pytest.mark.asyncio
async def test_secret_invalid_key(client: AsyncClient, functions_dir: Path):
    resp = await client.put("/api/secrets/", json={"key": "bad-key!", "value": "v"})
    assert resp.json() == {
        "success": False,
        "error": "Invalid key name. Use letters, numbers, and underscores only.",
        "kind": "invalid_key",
    }
    assert not (functions_dir / ".env").exists()


@pytest.mark.asyncio
async def test_tool_endpoint(client: AsyncClient):
    resp = await client.get("/api/tools/")
    assert "create_edge_function" in resp.json()["tools"]

    resp = await client.post(
        "/api/tools/create_edge_function", json={"name": "fn", "source": "export {}"}
    )
    assert resp.json()["success"] is True

    resp = await client.post("/api/tools/list_edge_functions")
    assert resp.json()["functions"][0]["name"] == "fn"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["service"] == "edge-functions"
    assert data["status"] in ("ok", "degraded")
