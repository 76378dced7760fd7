"""
Error classification for upstream requests.

Maps an HTTP status or a raised transport exception onto exactly one
``ErrorKind`` with a fixed, user-facing message. Classification is pure: it
never performs I/O and never mutates its inputs.
"""

import asyncio
from typing import Any

import aiohttp

from rescuedogs_mcp.core.exceptions import ClassifiedError, ErrorKind

RATE_LIMITED_MESSAGE = "Rate limited: Too many requests. Please try again in a moment."
SERVER_UNAVAILABLE_MESSAGE = (
    "Server error: The rescue dogs API is temporarily unavailable. Please try again later."
)
TIMEOUT_MESSAGE = "Request timeout: The API took too long to respond. Please try again."
CONNECTION_MESSAGE = (
    "Connection error: Unable to reach the rescue dogs API. "
    "Please check your internet connection."
)


def extract_detail(payload: Any) -> str | None:
    """Pull the human-readable ``detail`` out of an upstream error body.

    The API returns either ``{"detail": "text"}`` or a validation list of
    ``{"loc": [...], "msg": "..."}`` objects under ``detail``.

    Args:
        payload: Decoded JSON error body, or None if the body was not JSON.

    Returns:
        Detail text, or None if the body carries none.
    """
    if not isinstance(payload, dict):
        return None

    detail = payload.get("detail")
    if not detail:
        return None
    if isinstance(detail, str):
        return detail

    if isinstance(detail, list):
        parts = []
        for item in detail:
            if isinstance(item, dict):
                loc = ".".join(str(p) for p in item.get("loc") or [] if p != "query")
                msg = item.get("msg") or ""
                parts.append(f"{loc}: {msg}" if loc else msg)
            else:
                parts.append(str(item))
        return "; ".join(p for p in parts if p) or None

    return str(detail)


def classify_status(
    status: int,
    detail: str | None = None,
    reason: str | None = None,
) -> ClassifiedError:
    """Classify a non-success HTTP response.

    Args:
        status: HTTP status code.
        detail: Upstream detail text, if any.
        reason: HTTP reason phrase, used when no detail is available.

    Returns:
        The classified error for this status.
    """
    if status == 404:
        return ClassifiedError(
            ErrorKind.NOT_FOUND,
            f"Not found: {detail or 'The requested resource was not found'}",
            status_code=status,
        )
    if status == 422:
        return ClassifiedError(
            ErrorKind.INVALID_REQUEST,
            f"Invalid request: {detail or 'Validation error'}",
            status_code=status,
        )
    if status == 429:
        return ClassifiedError(ErrorKind.RATE_LIMITED, RATE_LIMITED_MESSAGE, status_code=status)
    if status >= 500:
        return ClassifiedError(
            ErrorKind.SERVER_UNAVAILABLE, SERVER_UNAVAILABLE_MESSAGE, status_code=status
        )

    return ClassifiedError(
        ErrorKind.API_ERROR,
        f"API error ({status}): {detail or reason or 'Unexpected response'}",
        status_code=status,
    )


def classify_exception(exc: BaseException) -> ClassifiedError:
    """Classify an exception raised while performing a request.

    Args:
        exc: The raised exception.

    Returns:
        The classified error. Exceptions that are not transport failures are
        passed through with their message unchanged.
    """
    if isinstance(exc, ClassifiedError):
        return exc

    # asyncio.TimeoutError is an alias of TimeoutError on 3.11+
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return ClassifiedError(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE)

    # TLS failures subclass ClientConnectorError but are not transient
    if isinstance(exc, aiohttp.ClientSSLError):
        return ClassifiedError(ErrorKind.NETWORK_ERROR, f"Network error: {exc}")

    if isinstance(exc, (aiohttp.ClientConnectorError, ConnectionRefusedError)):
        return ClassifiedError(ErrorKind.CONNECTION_ERROR, CONNECTION_MESSAGE)

    if isinstance(exc, aiohttp.ClientError):
        return ClassifiedError(ErrorKind.NETWORK_ERROR, f"Network error: {exc}")

    return ClassifiedError(ErrorKind.PASSTHROUGH, str(exc) or type(exc).__name__)
