"""
Result type returned by the backend client.

A ``Result`` holds either a parsed payload or the ``ClassifiedError`` that
ended the request, never both. Callers branch on ``ok`` or call ``unwrap()``
to re-raise the error.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from rescuedogs_mcp.core.exceptions import ClassifiedError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success payload XOR classified error."""

    value: T | None = None
    error: ClassifiedError | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ClassifiedError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the payload, raising the classified error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
