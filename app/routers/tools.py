"""Generic tool-call endpoint: ``POST /api/tools/{tool_name}`` with the argument object."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from app.dependencies import get_edge_tools
from app.services.edge_tools import EdgeFunctionTools

router = APIRouter()


@router.get("/")
async def list_tools():
    return {"tools": list(EdgeFunctionTools.TOOL_NAMES)}


@router.post("/{tool_name}")
async def call_tool(
    tool_name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    tools: EdgeFunctionTools = Depends(get_edge_tools),
):
    return await tools.call_tool(tool_name, arguments)
