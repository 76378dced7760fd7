"""
Tests for upstream error classification.
"""

import asyncio
import ssl

import aiohttp
import pytest
from aiohttp.client_reqrep import ConnectionKey

from rescuedogs_mcp.client.classifier import (
    CONNECTION_MESSAGE,
    RATE_LIMITED_MESSAGE,
    SERVER_UNAVAILABLE_MESSAGE,
    TIMEOUT_MESSAGE,
    classify_exception,
    classify_status,
    extract_detail,
)
from rescuedogs_mcp.core.exceptions import ClassifiedError, ErrorKind


class TestExtractDetail:
    """Tests for extract_detail."""

    def test_string_detail(self):
        """Test a plain string detail."""
        assert extract_detail({"detail": "Animal not found"}) == "Animal not found"

    def test_validation_list(self):
        """Test that validation errors are flattened without the query prefix."""
        payload = {
            "detail": [
                {"loc": ["query", "limit"], "msg": "must be <= 100"},
                {"loc": ["query", "sex"], "msg": "invalid value"},
            ]
        }

        assert extract_detail(payload) == "limit: must be <= 100; sex: invalid value"

    def test_no_detail(self):
        """Test bodies without a usable detail."""
        assert extract_detail(None) is None
        assert extract_detail({"error": "x"}) is None
        assert extract_detail(["not", "a", "dict"]) is None


class TestClassifyStatus:
    """Tests for classify_status."""

    @pytest.mark.parametrize(
        "status,kind",
        [
            (404, ErrorKind.NOT_FOUND),
            (422, ErrorKind.INVALID_REQUEST),
            (429, ErrorKind.RATE_LIMITED),
            (500, ErrorKind.SERVER_UNAVAILABLE),
            (503, ErrorKind.SERVER_UNAVAILABLE),
            (400, ErrorKind.API_ERROR),
            (403, ErrorKind.API_ERROR),
        ],
    )
    def test_status_kinds(self, status, kind):
        """Test that each status maps to exactly one kind."""
        error = classify_status(status)

        assert error.kind is kind
        assert error.status_code == status

    def test_not_found_includes_detail(self):
        """Test that 404 messages carry the upstream detail."""
        error = classify_status(404, "Animal not found")

        assert error.message == "Not found: Animal not found"

    def test_not_found_default(self):
        """Test the 404 message when upstream gives no detail."""
        assert classify_status(404).message == "Not found: The requested resource was not found"

    def test_invalid_request_includes_detail(self):
        """Test that 422 messages carry the upstream detail."""
        assert classify_status(422, "limit: too big").message == "Invalid request: limit: too big"

    def test_fixed_messages(self):
        """Test the fixed messages for rate limiting and server failures."""
        assert classify_status(429, "ignored").message == RATE_LIMITED_MESSAGE
        assert classify_status(502, "ignored").message == SERVER_UNAVAILABLE_MESSAGE

    def test_api_error_message(self):
        """Test that other statuses report the code and detail or reason."""
        assert classify_status(400, "Bad filter").message == "API error (400): Bad filter"
        assert classify_status(418, None, "I'm a teapot").message == "API error (418): I'm a teapot"

    def test_retryable_kinds(self):
        """Test which statuses may be retried."""
        assert classify_status(429).retryable
        assert classify_status(500).retryable
        assert not classify_status(404).retryable
        assert not classify_status(422).retryable
        assert not classify_status(400).retryable


class TestClassifyException:
    """Tests for classify_exception."""

    def test_timeout(self):
        """Test that timeouts are classified as TIMEOUT."""
        error = classify_exception(asyncio.TimeoutError())

        assert error.kind is ErrorKind.TIMEOUT
        assert error.message == TIMEOUT_MESSAGE
        assert error.retryable

    def test_connection_refused(self):
        """Test that refused connections are classified as CONNECTION_ERROR."""
        error = classify_exception(ConnectionRefusedError())

        assert error.kind is ErrorKind.CONNECTION_ERROR
        assert error.message == CONNECTION_MESSAGE
        assert error.retryable

    def test_other_client_error(self):
        """Test that other aiohttp errors are network errors and not retried."""
        error = classify_exception(aiohttp.ClientPayloadError("truncated body"))

        assert error.kind is ErrorKind.NETWORK_ERROR
        assert "truncated body" in error.message
        assert not error.retryable

    def test_certificate_error_not_retried(self):
        """Test that a TLS certificate failure is a network error, not a connection error."""
        key = ConnectionKey("api.test", 443, True, True, None, None, None)
        exc = aiohttp.ClientConnectorCertificateError(key, ssl.SSLCertVerificationError("bad cert"))

        error = classify_exception(exc)

        assert error.kind is ErrorKind.NETWORK_ERROR
        assert not error.retryable

    def test_passthrough(self):
        """Test that unrelated exceptions keep their message."""
        error = classify_exception(ValueError("bad payload"))

        assert error.kind is ErrorKind.PASSTHROUGH
        assert error.message == "bad payload"
        assert not error.retryable

    def test_passthrough_without_message(self):
        """Test that an empty message falls back to the exception type."""
        assert classify_exception(KeyError()).message == "KeyError"

    def test_classified_error_unchanged(self):
        """Test that an already classified error is returned as-is."""
        original = ClassifiedError(ErrorKind.NOT_FOUND, "Not found: x")

        assert classify_exception(original) is original
