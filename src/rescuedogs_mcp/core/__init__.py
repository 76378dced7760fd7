"""
Core module for the rescue dogs MCP server.

Contains data models, vocabulary mappings, the result type, and exceptions.
"""

from rescuedogs_mcp.core.exceptions import (
    CacheError,
    ClassifiedError,
    ErrorKind,
    RescueDogsError,
    ValidationError,
)
from rescuedogs_mcp.core.mappings import (
    normalize_country_for_api,
    normalize_country_for_guide,
)
from rescuedogs_mcp.core.models import (
    BreedStats,
    Dog,
    EnhancedDogData,
    FilterCounts,
    FilterCriteria,
    ImageContent,
    ImagePreset,
    Organization,
    ResponseFormat,
    Statistics,
)
from rescuedogs_mcp.core.result import Result

__all__ = [
    # Models
    "BreedStats",
    "Dog",
    "EnhancedDogData",
    "FilterCounts",
    "FilterCriteria",
    "ImageContent",
    "ImagePreset",
    "Organization",
    "ResponseFormat",
    "Statistics",
    "Result",
    # Mappings
    "normalize_country_for_api",
    "normalize_country_for_guide",
    # Exceptions
    "RescueDogsError",
    "ClassifiedError",
    "ErrorKind",
    "ValidationError",
    "CacheError",
]
