"""
Input validation utilities.

Provides validation for dog slugs, country codes, and upstream response sizes
before values are placed into outgoing requests.
"""

import re
from urllib.parse import quote

from rescuedogs_mcp.core.exceptions import ValidationError

_SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$", re.IGNORECASE)

# Two-letter ISO codes plus the backend's "UK"
_COUNTRY_PATTERN = re.compile(r"^[A-Z]{2}$", re.IGNORECASE)

MAX_SLUG_LENGTH = 200

# Maximum response size (10 MB)
MAX_RESPONSE_SIZE = 10 * 1024 * 1024


def validate_slug(slug: str) -> str:
    """Validate a dog slug.

    Args:
        slug: URL-friendly dog identifier (e.g. "buddy-12345").

    Returns:
        The slug with surrounding whitespace removed.

    Raises:
        ValidationError: If the slug is empty or contains invalid characters.
    """
    slug = (slug or "").strip()
    if not slug:
        raise ValidationError("slug", "", "Slug cannot be empty")

    if len(slug) > MAX_SLUG_LENGTH:
        raise ValidationError(
            "slug", slug[:50] + "...", f"Slug exceeds {MAX_SLUG_LENGTH} character limit"
        )

    if not _SLUG_PATTERN.match(slug):
        raise ValidationError(
            "slug",
            slug,
            "Slug must contain only letters, digits, hyphens, and underscores",
        )

    return slug


def validate_country_code(code: str | None) -> str | None:
    """Validate a two-letter country code, leaving case untouched."""
    if code is None:
        return None
    stripped = code.strip()
    if not _COUNTRY_PATTERN.match(stripped):
        raise ValidationError("country", code, "Expected a two-letter country code")
    return stripped


def encode_path_segment(value: str) -> str:
    """URL-encode a value for use as a single path segment."""
    return quote(value, safe="")


def validate_response_size(
    content_length: int | None,
    max_size: int = MAX_RESPONSE_SIZE,
) -> None:
    """Validate that a response size is within acceptable limits.

    Args:
        content_length: The Content-Length header value (may be None).
        max_size: Maximum allowed response size in bytes.

    Raises:
        ValidationError: If the response is too large.
    """
    if content_length is not None and content_length > max_size:
        size_mb = content_length / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        raise ValidationError(
            "response_size",
            f"{size_mb:.1f} MB",
            f"Response exceeds maximum size of {max_mb:.0f} MB",
        )
