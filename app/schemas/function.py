"""Edge Function request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field, JsonValue

from app.schemas.common import CamelModel, OperationResult


class FunctionCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    source: str
    import_map: dict[str, str] | None = None
    verify_jwt: bool | None = Field(default=None, alias="verifyJWT")


class FunctionDelete(CamelModel):
    name: str = Field(..., min_length=1)


class FunctionInvoke(CamelModel):
    name: str = Field(..., min_length=1)
    payload: JsonValue | None = None
    headers: dict[str, str] | None = None


class FunctionInfo(CamelModel):
    name: str
    has_index: bool
    has_import_map: bool
    updated_at: datetime | None = None  # None when the source file is missing


class FunctionDeployResult(OperationResult):
    message: str = ""
    path: str = ""
    verify_jwt: bool = Field(default=True, alias="verifyJWT")
    note: str = ""


class FunctionListResult(OperationResult):
    functions: list[FunctionInfo] = []


class FunctionDeleteResult(OperationResult):
    message: str = ""


class InvokeResult(OperationResult):
    message: str = ""
    result: Any = None
    status: int | None = None
