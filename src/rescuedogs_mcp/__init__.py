"""
Rescue Dogs MCP server

Exposes the rescuedogs.me API (rescue dogs from European and UK
organizations) as MCP tools over stdio, with a short-lived in-memory cache
and CDN image proxying.

Quick Start:
    >>> import asyncio
    >>> from rescuedogs_mcp import RescueDogsService, Settings
    >>> from rescuedogs_mcp.tools.schemas import SearchDogsInput
    >>> service = RescueDogsService.from_settings(Settings.from_env())
    >>> response = asyncio.run(service.search_dogs(SearchDogsInput(size="Small")))
    >>> print(response.texts[0])

    # Or run the MCP server:
    $ rescuedogs-mcp serve
"""

__version__ = "0.1.0"

from rescuedogs_mcp.cache.memory import MISSING, CacheLayer, filter_hash
from rescuedogs_mcp.client.api import RescueDogsClient
from rescuedogs_mcp.client.images import ImageClient
from rescuedogs_mcp.config import Settings

# Exceptions
from rescuedogs_mcp.core.exceptions import (
    CacheError,
    ClassifiedError,
    ErrorKind,
    RescueDogsError,
    ValidationError,
)
from rescuedogs_mcp.core.result import Result
from rescuedogs_mcp.tools.service import RescueDogsService, ToolResponse

__all__ = [
    # Version
    "__version__",
    # Components
    "CacheLayer",
    "MISSING",
    "filter_hash",
    "RescueDogsClient",
    "ImageClient",
    "RescueDogsService",
    "ToolResponse",
    "Settings",
    "Result",
    # Exceptions
    "RescueDogsError",
    "ClassifiedError",
    "ErrorKind",
    "ValidationError",
    "CacheError",
]
