"""
Rescue dogs API client.

One method per upstream endpoint. Each method builds a request descriptor,
executes it through the retry policy in ``HttpClient`` and parses the body
into typed models on receipt.
"""

from typing import Any, Optional

import aiohttp

from rescuedogs_mcp.client.base import DATA_TIMEOUT, HttpClient, RequestDescriptor
from rescuedogs_mcp.core.models import (
    BreedStats,
    Dog,
    EnhancedDogData,
    FilterCounts,
    Organization,
    Statistics,
)
from rescuedogs_mcp.core.result import Result
from rescuedogs_mcp.core.validation import encode_path_segment

# Applied to every search, ahead of caller filters
SEARCH_CONSTRAINTS: tuple[tuple[str, str], ...] = (
    ("status", "available"),
    ("availability_confidence", "high,medium"),
)

FILTER_COUNT_CONSTRAINTS: tuple[tuple[str, str], ...] = (("status", "available"),)

# Search parameters callers may set, in the order they are sent
SEARCH_FILTERS = (
    "search",
    "breed",
    "breed_group",
    "standardized_size",
    "age_category",
    "sex",
    "energy_level",
    "home_type",
    "experience_level",
    "available_to_country",
    "organization_id",
    "good_with_kids",
    "good_with_dogs",
    "good_with_cats",
    "limit",
    "offset",
)

# Same filters as search, without pagination
FILTER_COUNT_FILTERS = tuple(name for name in SEARCH_FILTERS if name not in ("limit", "offset"))


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_params(
    constraints: tuple[tuple[str, str], ...],
    allowed: tuple[str, ...],
    filters: dict[str, Any],
) -> tuple[tuple[str, str], ...]:
    """Build an ordered query from fixed constraints and optional filters.

    Constraints are written first. Filters whose value is None or an empty
    string are left out, and a filter can never replace a constraint key.

    Args:
        constraints: Fixed parameters that are always sent.
        allowed: Filter names accepted for this endpoint.
        filters: Caller filters keyed by upstream parameter name.

    Returns:
        Ordered tuple of (name, value) pairs.

    Raises:
        TypeError: If ``filters`` contains a name this endpoint does not accept.
    """
    unknown = set(filters) - set(allowed)
    if unknown:
        raise TypeError(f"Unsupported filter(s): {', '.join(sorted(unknown))}")

    fixed = {name for name, _ in constraints}
    params = list(constraints)
    for name in allowed:
        value = filters.get(name)
        if value is None or value == "" or name in fixed:
            continue
        params.append((name, _param_value(value)))
    return tuple(params)


def _parse_list(model: Any) -> Any:
    def parse(data: Any) -> list:
        if not isinstance(data, list):
            raise TypeError(f"Expected a JSON array, got {type(data).__name__}")
        return [model.from_dict(item) for item in data]

    return parse


def _parse_breed_names(data: Any) -> list[str]:
    if not isinstance(data, list):
        raise TypeError(f"Expected a JSON array, got {type(data).__name__}")
    return [str(name) for name in data]


class RescueDogsClient(HttpClient):
    """Async client for the rescue dogs REST API."""

    BASE_URL = "https://api.rescuedogs.me"

    def __init__(
        self,
        base_url: str = BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        retry_delay: float = 0.5,
        timeout: float = DATA_TIMEOUT,
    ):
        super().__init__(base_url, session, retry_delay)
        self.timeout = timeout

    def _get(self, path: str, params: tuple[tuple[str, str], ...] = ()) -> RequestDescriptor:
        return RequestDescriptor("GET", path, params=params, timeout=self.timeout)

    async def search_dogs(self, **filters: Any) -> Result:
        """Search available dogs.

        Keyword arguments use upstream parameter names (``search``,
        ``standardized_size``, ``available_to_country``, ...). The
        availability constraints are always applied.

        Returns:
            Result holding a list of Dog.
        """
        params = build_params(SEARCH_CONSTRAINTS, SEARCH_FILTERS, filters)
        return await self._execute(self._get("/api/animals", params), _parse_list(Dog))

    async def get_dog_by_slug(self, slug: str) -> Result:
        """Fetch one dog by its slug.

        Returns:
            Result holding a Dog.
        """
        path = f"/api/animals/{encode_path_segment(slug)}"
        return await self._execute(self._get(path), Dog.from_dict)

    async def get_enhanced_dog_data(self, animal_id: int) -> Result:
        """Fetch enrichment data for one dog.

        Returns:
            Result holding EnhancedDogData.
        """
        path = f"/api/enhanced_animals/{int(animal_id)}/enhanced"
        return await self._execute(self._get(path), EnhancedDogData.from_dict)

    async def get_bulk_enhanced_data(self, animal_ids: list[int]) -> Result:
        """Fetch enrichment data for many dogs in a single request.

        Returns:
            Result holding a list of EnhancedDogData.
        """
        descriptor = RequestDescriptor(
            "POST",
            "/api/enhanced_animals/enhanced/bulk",
            body={"animal_ids": [int(i) for i in animal_ids]},
            timeout=self.timeout,
        )
        return await self._execute(descriptor, _parse_list(EnhancedDogData))

    async def get_breed_stats(self) -> Result:
        """Result holding BreedStats."""
        return await self._execute(self._get("/api/animals/breeds/stats"), BreedStats.from_dict)

    async def get_breeds(self, breed_group: Optional[str] = None) -> Result:
        """Result holding a list of breed names, optionally for one group."""
        params = (("breed_group", breed_group),) if breed_group else ()
        return await self._execute(self._get("/api/animals/meta/breeds", params), _parse_breed_names)

    async def get_statistics(self) -> Result:
        """Result holding Statistics."""
        return await self._execute(self._get("/api/animals/statistics"), Statistics.from_dict)

    async def get_filter_counts(self, **filters: Any) -> Result:
        """Fetch filter option counts for a filter context.

        Returns:
            Result holding FilterCounts.
        """
        params = build_params(FILTER_COUNT_CONSTRAINTS, FILTER_COUNT_FILTERS, filters)
        return await self._execute(
            self._get("/api/animals/meta/filter_counts", params), FilterCounts.from_dict
        )

    async def get_organizations(
        self,
        country: Optional[str] = None,
        active_only: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Result:
        """List rescue organizations.

        Returns:
            Result holding a list of Organization.
        """
        params = build_params(
            (),
            ("country", "active_only", "limit", "offset"),
            {"country": country, "active_only": active_only, "limit": limit, "offset": offset},
        )
        return await self._execute(
            self._get("/api/organizations", params), _parse_list(Organization)
        )

    async def get_enhanced_organizations(self) -> Result:
        """Result holding a list of Organization with aggregate counts."""
        return await self._execute(
            self._get("/api/organizations/enhanced"), _parse_list(Organization)
        )
