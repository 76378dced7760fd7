"""
Custom exceptions for the rescue dogs MCP server.
"""

from enum import Enum


class RescueDogsError(Exception):
    """Base exception for all rescue dogs errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ErrorKind(Enum):
    """Closed set of failure kinds produced by the error classifier."""

    NOT_FOUND = "not_found"
    INVALID_REQUEST = "invalid_request"
    RATE_LIMITED = "rate_limited"
    SERVER_UNAVAILABLE = "server_unavailable"
    API_ERROR = "api_error"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    NETWORK_ERROR = "network_error"
    PASSTHROUGH = "passthrough"

    def __str__(self) -> str:
        return self.value

    @property
    def retryable(self) -> bool:
        """Return True if a request failing with this kind may be retried once."""
        return self in (
            ErrorKind.RATE_LIMITED,
            ErrorKind.SERVER_UNAVAILABLE,
            ErrorKind.TIMEOUT,
            ErrorKind.CONNECTION_ERROR,
        )


class ClassifiedError(RescueDogsError):
    """A normalized failure of a single upstream request.

    Produced once per failed attempt by the classifier and never modified
    afterwards. The message is user-facing and already carries any detail
    text the upstream API returned.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __repr__(self) -> str:
        return f"ClassifiedError(kind={self.kind.value!r}, message={self.message!r})"


class CacheError(RescueDogsError):
    """Raised when a cache operation fails."""

    def __init__(self, operation: str, details: str | None = None):
        super().__init__(f"Cache error during {operation}", details=details)
        self.operation = operation


class ValidationError(RescueDogsError):
    """Raised when caller input or an upstream payload fails validation."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(
            f"Validation failed for {field}",
            details=f"Value '{value}' is invalid: {reason}",
        )
        self.field = field
        self.value = value
        self.reason = reason
