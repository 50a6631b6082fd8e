"""Edge Function secret endpoints (values are never returned unmasked)."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from app.dependencies import get_edge_tools
from app.services.edge_tools import EdgeFunctionTools

router = APIRouter()


@router.get("/")
async def list_secrets(tools: EdgeFunctionTools = Depends(get_edge_tools)):
    return await tools.list_secrets()


@router.put("/")
async def set_secret(
    data: dict[str, Any] = Body(...), tools: EdgeFunctionTools = Depends(get_edge_tools)
):
    """Create or update one secret and restart the Edge Runtime."""
    return await tools.set_secret(data)


@router.delete("/{key}")
async def delete_secret(key: str, tools: EdgeFunctionTools = Depends(get_edge_tools)):
    return await tools.delete_secret({"key": key})
