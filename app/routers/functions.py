"""Edge Function deploy/list/delete/invoke endpoints.

Every route answers 200 with the operation envelope; check ``success``.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from app.dependencies import get_edge_tools
from app.services.edge_tools import EdgeFunctionTools

router = APIRouter()


@router.get("/")
async def list_functions(tools: EdgeFunctionTools = Depends(get_edge_tools)):
    return await tools.list_edge_functions()


@router.post("/")
async def deploy_function(
    data: dict[str, Any] = Body(...), tools: EdgeFunctionTools = Depends(get_edge_tools)
):
    """Create or overwrite a function (``name``, ``source``, ``importMap``, ``verifyJWT``)."""
    return await tools.create_edge_function(data)


@router.delete("/{name}")
async def delete_function(name: str, tools: EdgeFunctionTools = Depends(get_edge_tools)):
    return await tools.delete_edge_function({"name": name})


@router.post("/{name}/invoke")
async def invoke_function(
    name: str,
    data: dict[str, Any] | None = Body(default=None),
    tools: EdgeFunctionTools = Depends(get_edge_tools),
):
    """Invoke a deployed function; body may carry ``payload`` and ``headers``."""
    return await tools.invoke_edge_function({**(data or {}), "name": name})
