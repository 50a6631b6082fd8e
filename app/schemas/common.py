"""Shared result envelope for store operations."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ErrorKind(StrEnum):
    """Why a store operation failed."""

    CONFIGURATION_MISSING = "configuration_missing"
    INVALID_KEY = "invalid_key"
    INVALID_NAME = "invalid_name"
    INVALID_ARGUMENTS = "invalid_arguments"
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"
    INVOKE_FAILURE = "invoke_failure"
    UNEXPECTED = "unexpected"


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, emits camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OperationResult(CamelModel):
    """Base for every store result: either success or an error with its kind."""

    success: bool = True
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def fail(cls, kind: ErrorKind, error: str):
        return cls(success=False, kind=kind, error=error)

    def envelope(self) -> dict[str, Any]:
        """Render as ``{success: true, ...}`` or ``{success: false, error, kind}``."""
        if not self.success:
            return {"success": False, "error": self.error, "kind": self.kind.value if self.kind else None}
        return self.model_dump(mode="json", by_alias=True, exclude={"error", "kind"})
