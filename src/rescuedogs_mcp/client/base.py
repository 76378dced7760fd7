"""
Base HTTP client shared by the API and image clients.

Owns the aiohttp session, builds common headers, executes request
descriptors, and applies the single-retry policy. Every failure is routed
through the classifier and returned as a failed ``Result``.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import aiohttp

from rescuedogs_mcp import __version__
from rescuedogs_mcp.client.classifier import (
    classify_exception,
    classify_status,
    extract_detail,
)
from rescuedogs_mcp.core.result import Result
from rescuedogs_mcp.core.validation import MAX_RESPONSE_SIZE, validate_response_size

logger = logging.getLogger(__name__)

DATA_TIMEOUT = 10.0  # seconds
IMAGE_TIMEOUT = 5.0  # seconds


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue (and reissue) one upstream request."""

    method: str
    path: str
    params: tuple[tuple[str, str], ...] = ()
    body: Any = None
    timeout: float = DATA_TIMEOUT
    binary: bool = False


class HttpClient:
    """Session owner and request executor.

    A retryable failure is retried exactly once with the identical
    descriptor. When the retry fails too, its error (not the first one) is
    returned.
    """

    # Maximum response size (10 MB) - can be overridden by subclasses
    MAX_RESPONSE_SIZE = MAX_RESPONSE_SIZE

    def __init__(
        self,
        base_url: str,
        session: Optional[aiohttp.ClientSession] = None,
        retry_delay: float = 0.5,
    ):
        """Initialize the client.

        Args:
            base_url: Scheme and host that request paths are appended to.
            session: Optional aiohttp session. If not provided, one will
                     be created when needed.
            retry_delay: Seconds to wait before the single retry.
        """
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self.retry_delay = retry_delay

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _build_headers(self, binary: bool = False) -> dict[str, str]:
        """Build common request headers."""
        return {
            "User-Agent": f"rescuedogs-mcp/{__version__}",
            "Accept": "image/jpeg,image/png,image/*" if binary else "application/json",
        }

    def _check_response_size(self, response: aiohttp.ClientResponse) -> None:
        """Reject responses whose declared size is over the limit.

        Raises:
            ValidationError: If the response is too large.
        """
        content_length = response.headers.get("Content-Length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                return  # Invalid Content-Length header, let the read decide
            validate_response_size(size, self.MAX_RESPONSE_SIZE)

    async def _execute(
        self,
        descriptor: RequestDescriptor,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Result:
        """Execute a request with at most one retry.

        Args:
            descriptor: The request to issue.
            parse: Converts the decoded body into a typed payload. A parse
                   failure is reported as a passthrough error.

        Returns:
            Result holding the parsed payload or the classified error.
        """
        result = await self._attempt(descriptor, parse)
        if result.ok or not result.error.retryable:
            return result

        logger.info(
            "Retrying %s %s after %s", descriptor.method, descriptor.path, result.error.kind
        )
        if self.retry_delay > 0:
            await asyncio.sleep(self.retry_delay)
        return await self._attempt(descriptor, parse)

    async def _attempt(
        self,
        descriptor: RequestDescriptor,
        parse: Optional[Callable[[Any], Any]],
    ) -> Result:
        # Absolute URLs (external image hosts) bypass the base URL
        if "://" in descriptor.path:
            url = descriptor.path
        else:
            url = f"{self.base_url}{descriptor.path}"
        try:
            async with self.session.request(
                descriptor.method,
                url,
                params=list(descriptor.params) or None,
                json=descriptor.body,
                headers=self._build_headers(descriptor.binary),
                timeout=aiohttp.ClientTimeout(total=descriptor.timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    payload = await self._read_error_body(resp)
                    error = classify_status(resp.status, extract_detail(payload), resp.reason)
                    logger.debug("%s %s -> %s", descriptor.method, url, resp.status)
                    return Result.failure(error)

                self._check_response_size(resp)
                if descriptor.binary:
                    data = await resp.read()
                else:
                    data = await resp.json(content_type=None)

            return Result.success(parse(data) if parse else data)

        except Exception as e:
            error = classify_exception(e)
            logger.debug("%s %s failed: %s (%s)", descriptor.method, url, error, error.kind)
            return Result.failure(error)

    @staticmethod
    async def _read_error_body(resp: aiohttp.ClientResponse) -> Any:
        try:
            return await resp.json(content_type=None)
        except (aiohttp.ClientError, ValueError):
            return None
