"""Secret request/response schemas."""

from pydantic import Field

from app.schemas.common import CamelModel, OperationResult


class SecretSet(CamelModel):
    key: str = Field(..., max_length=256)
    value: str  # plaintext — written to the shared .env file


class SecretDelete(CamelModel):
    key: str


class SecretEntry(CamelModel):
    key: str
    masked_value: str  # e.g. "sk_•••••••" — never the raw value
    length: int


class SecretSetResult(OperationResult):
    message: str = ""
    created: bool = False
    restarted: bool = False
    note: str = ""


class SecretDeleteResult(OperationResult):
    message: str = ""
    restarted: bool = False
    note: str = ""


class SecretListResult(OperationResult):
    secrets: list[SecretEntry] = []
    message: str = ""
