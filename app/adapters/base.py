"""Abstract base class for function-invocation backends.

Swap the Supabase HTTP gateway for another runtime by implementing this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

# Marker for "send no request body" (distinct from a JSON null payload)
NO_BODY = object()


@dataclass
class InvokeOutcome:
    """What came back from one invocation: a payload, or an error message."""

    data: Any = None
    error: str | None = None
    status: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FunctionsBackend(ABC):
    """Contract that any function backend must satisfy."""

    @abstractmethod
    async def invoke(
        self,
        name: str,
        *,
        body: Any = NO_BODY,
        headers: dict[str, str] | None = None,
    ) -> InvokeOutcome:
        """Invoke a deployed function by name and return its decoded response."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release any pooled connections."""
