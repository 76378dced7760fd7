"""
Report module for rendering tool output.

Provides markdown formatters and static adoption guide content.
"""

from rescuedogs_mcp.reports.formatters import (
    CHARACTER_LIMIT,
    format_breed_names,
    format_breed_stats,
    format_dog,
    format_dog_list,
    format_filter_counts,
    format_organizations,
    format_statistics,
    truncate_if_needed,
)
from rescuedogs_mcp.reports.guides import GUIDE_TOPICS, get_adoption_guide

__all__ = [
    "CHARACTER_LIMIT",
    "GUIDE_TOPICS",
    "format_breed_names",
    "format_breed_stats",
    "format_dog",
    "format_dog_list",
    "format_filter_counts",
    "format_organizations",
    "format_statistics",
    "get_adoption_guide",
    "truncate_if_needed",
]
