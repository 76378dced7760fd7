"""
Retrieval service behind the MCP tools.

One async method per tool. Each method checks the cache, falls back to the
API client on a miss, repopulates the cache, and renders the result as
markdown or JSON. Failures of primary data end the call with an error
response; enrichment and image failures only drop the optional parts.
"""

import functools
import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Optional, Union

from rescuedogs_mcp.cache.memory import MISSING, CacheLayer, filter_hash
from rescuedogs_mcp.client.api import RescueDogsClient
from rescuedogs_mcp.client.images import ImageClient
from rescuedogs_mcp.config import Settings
from rescuedogs_mcp.core.exceptions import RescueDogsError
from rescuedogs_mcp.core.mappings import (
    ENERGY_LEVEL_MAP,
    EXPERIENCE_MAP,
    HOME_TYPE_MAP,
    map_age_category,
    map_sex,
    map_value,
    normalize_country_for_api,
)
from rescuedogs_mcp.core.models import (
    BreedStats,
    Dog,
    EnhancedDogData,
    FilterCounts,
    ImageContent,
    ImagePreset,
    Organization,
    ResponseFormat,
    Statistics,
)
from rescuedogs_mcp.core.validation import validate_country_code, validate_slug
from rescuedogs_mcp.reports.formatters import (
    MAX_IMAGES,
    format_breed_names,
    format_breed_stats,
    format_dog,
    format_dog_list,
    format_filter_counts,
    format_organizations,
    format_statistics,
)
from rescuedogs_mcp.reports.guides import get_adoption_guide
from rescuedogs_mcp.tools.schemas import (
    GetAdoptionGuideInput,
    GetDogDetailsInput,
    GetFilterCountsInput,
    GetStatisticsInput,
    ListBreedsInput,
    ListOrganizationsInput,
    MatchPreferencesInput,
    SearchDogsInput,
)

logger = logging.getLogger(__name__)

ContentBlock = Union[str, ImageContent]


@dataclass
class ToolResponse:
    """Ordered text and image blocks returned from one tool call."""

    content: list[ContentBlock] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[text])

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(content=[f"Error: {message}"], is_error=True)

    @property
    def texts(self) -> list[str]:
        return [block for block in self.content if isinstance(block, str)]

    @property
    def images(self) -> list[ImageContent]:
        return [block for block in self.content if isinstance(block, ImageContent)]


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _with_enhanced(dog: Dog, enhanced: Optional[EnhancedDogData]) -> dict:
    data = dog.to_dict()
    data["enhanced"] = enhanced.to_dict() if enhanced else None
    return data


def tool_errors(
    method: Callable[..., Awaitable[ToolResponse]],
) -> Callable[..., Awaitable[ToolResponse]]:
    """Turn known failures of a service method into an error response."""

    @functools.wraps(method)
    async def wrapper(*args: Any, **kwargs: Any) -> ToolResponse:
        try:
            return await method(*args, **kwargs)
        except RescueDogsError as e:
            return ToolResponse.error(str(e))

    return wrapper


class RescueDogsService:
    """Tool implementations over the API client, image client and cache.

    Concurrent calls that miss the same cache key each fetch and each write
    the result; the later write wins.
    """

    def __init__(
        self,
        client: RescueDogsClient,
        images: ImageClient,
        cache: CacheLayer,
    ):
        self.client = client
        self.images = images
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: Settings) -> "RescueDogsService":
        """Wire a service with fresh clients and an empty cache."""
        cache = CacheLayer()
        client = RescueDogsClient(settings.api_url, retry_delay=settings.retry_delay)
        images = ImageClient(cache, settings.image_url, retry_delay=settings.retry_delay)
        return cls(client, images, cache)

    async def close(self) -> None:
        """Close both HTTP clients."""
        await self.client.close()
        await self.images.close()

    # Shared fetch helpers

    async def _bulk_enhanced(self, dogs: list[Dog]) -> dict[int, EnhancedDogData]:
        if not dogs:
            return {}
        result = await self.client.get_bulk_enhanced_data([dog.id for dog in dogs])
        if not result.ok:
            logger.warning("Enhanced data fetch failed: %s", result.error)
            return {}
        return {item.id: item for item in result.value}

    async def _image_blocks(self, dogs: list[Dog], preset: ImagePreset) -> list[ContentBlock]:
        shown = dogs[:MAX_IMAGES]
        images = await self.images.fetch_dog_images(
            [dog.primary_image_url for dog in shown], preset
        )
        blocks: list[ContentBlock] = []
        for dog, image in zip(shown, images):
            if image is not None:
                blocks.extend([f"\n**{dog.name}:**", image])
        return blocks

    async def _active_organizations(self) -> Optional[list[Organization]]:
        orgs = self.cache.get_organizations()
        if orgs is not MISSING:
            return orgs

        result = await self.client.get_organizations(active_only=True)
        if not result.ok:
            logger.warning("Organization lookup failed, using text search: %s", result.error)
            return None
        self.cache.set_organizations(result.value)
        return result.value

    async def _match_organization(self, query: str) -> Optional[int]:
        """Return the id of an organization whose name matches the query."""
        orgs = await self._active_organizations()
        if not orgs:
            return None

        needle = query.lower()
        for org in orgs:
            name = org.name.lower()
            if name and (needle in name or name in needle):
                return org.id
        return None

    @staticmethod
    def _country(code: Optional[str]) -> Optional[str]:
        return normalize_country_for_api(validate_country_code(code))

    # Tools

    @tool_errors
    async def search_dogs(self, params: SearchDogsInput) -> ToolResponse:
        """Search available dogs, resolving organization names in the query."""
        organization_id = params.organization_id
        query = params.query
        if query and organization_id is None:
            matched = await self._match_organization(query)
            if matched is not None:
                organization_id = matched
                query = None

        dogs = (
            await self.client.search_dogs(
                search=query,
                breed=params.breed,
                breed_group=params.breed_group,
                standardized_size=params.size,
                age_category=map_age_category(params.age_category),
                sex=map_sex(params.sex),
                energy_level=params.energy_level,
                home_type=params.home_type,
                experience_level=params.experience_level,
                available_to_country=self._country(params.adoptable_to_country),
                organization_id=organization_id,
                good_with_kids=params.good_with_kids,
                good_with_dogs=params.good_with_dogs,
                good_with_cats=params.good_with_cats,
                limit=params.limit,
                offset=params.offset,
            )
        ).unwrap()
        enhanced = await self._bulk_enhanced(dogs)

        if params.response_format == ResponseFormat.JSON:
            return ToolResponse.text(
                _to_json(
                    {
                        "count": len(dogs),
                        "dogs": [_with_enhanced(dog, enhanced.get(dog.id)) for dog in dogs],
                        "has_more": len(dogs) == params.limit,
                    }
                )
            )

        response = ToolResponse.text(
            format_dog_list(dogs, enhanced, offset=params.offset, limit=params.limit)
        )
        if params.include_images and dogs:
            response.content.extend(await self._image_blocks(dogs, params.image_preset))
        return response

    @tool_errors
    async def get_dog_details(self, params: GetDogDetailsInput) -> ToolResponse:
        """Full profile for one dog; the photo, if requested, comes first."""
        dog: Dog = (await self.client.get_dog_by_slug(validate_slug(params.slug))).unwrap()

        result = await self.client.get_enhanced_dog_data(dog.id)
        enhanced = result.value if result.ok else None
        if not result.ok:
            logger.warning("Enhanced data fetch failed for %s: %s", dog.slug, result.error)

        if params.response_format == ResponseFormat.JSON:
            return ToolResponse.text(_to_json(_with_enhanced(dog, enhanced)))

        response = ToolResponse()
        if params.include_image:
            image = await self.images.fetch_dog_image(dog.primary_image_url, params.image_preset)
            if image is not None:
                response.content.append(image)
        response.content.append(format_dog(dog, enhanced))
        return response

    @tool_errors
    async def list_breeds(self, params: ListBreedsInput) -> ToolResponse:
        stats = self.cache.get_breed_stats()
        if stats is MISSING:
            stats = (await self.client.get_breed_stats()).unwrap()
            self.cache.set_breed_stats(stats)

        breeds = stats.qualifying_breeds
        if params.breed_group:
            group = params.breed_group.lower()
            breeds = [b for b in breeds if (b.breed_group or "").lower() == group]
        if params.min_count > 1:
            breeds = [b for b in breeds if b.count >= params.min_count]

        # A filtered copy; the cached object is shared
        filtered: BreedStats = replace(stats, qualifying_breeds=breeds)

        if params.response_format == ResponseFormat.JSON:
            return ToolResponse.text(_to_json(filtered.to_dict()))
        return ToolResponse.text(format_breed_stats(filtered, params.limit))

    @tool_errors
    async def get_statistics(self, params: GetStatisticsInput) -> ToolResponse:
        stats: Statistics = self.cache.get_statistics()
        if stats is MISSING:
            stats = (await self.client.get_statistics()).unwrap()
            self.cache.set_statistics(stats)

        if params.response_format == ResponseFormat.JSON:
            return ToolResponse.text(_to_json(stats.to_dict()))
        return ToolResponse.text(format_statistics(stats))

    @tool_errors
    async def get_filter_counts(self, params: GetFilterCountsInput) -> ToolResponse:
        """Filter options with counts, cached per filter context."""
        criteria = (
            params.current_filters.to_criteria()
            if params.current_filters
            else None
        )
        present = criteria.present() if criteria else {}
        key = filter_hash(present)

        counts: FilterCounts = self.cache.get_filter_counts(key)
        if counts is MISSING:
            counts = (
                await self.client.get_filter_counts(
                    breed=present.get("breed"),
                    standardized_size=present.get("size"),
                    age_category=map_age_category(present.get("age_category")),
                    sex=map_sex(present.get("sex")),
                    available_to_country=self._country(present.get("adoptable_to_country")),
                )
            ).unwrap()
            self.cache.set_filter_counts(key, counts)

        if params.response_format == ResponseFormat.JSON:
            data = counts.to_dict()
            data["available_country_options"] = [
                {"value": o.value, "label": o.label, "count": o.count}
                for o in counts.countries_by_count
            ]
            return ToolResponse.text(_to_json(data))
        return ToolResponse.text(format_filter_counts(counts))

    @tool_errors
    async def list_organizations(self, params: ListOrganizationsInput) -> ToolResponse:
        """List organizations; unfiltered listings are cached per active/limit pair."""
        country = self._country(params.country)
        variant = None if country else f"active_only={params.active_only}:limit={params.limit}"

        orgs = self.cache.get_organizations(variant) if variant else MISSING
        if orgs is MISSING:
            orgs = (
                await self.client.get_organizations(
                    country=country,
                    active_only=params.active_only,
                    limit=params.limit,
                )
            ).unwrap()
            if variant:
                self.cache.set_organizations(orgs, variant)

        if params.response_format == ResponseFormat.JSON:
            return ToolResponse.text(_to_json([org.to_dict() for org in orgs]))
        return ToolResponse.text(format_organizations(orgs))

    @tool_errors
    async def match_preferences(self, params: MatchPreferencesInput) -> ToolResponse:
        """Translate lifestyle answers into search filters and list matching dogs."""
        criteria: dict[str, Any] = {
            "home_type": map_value(HOME_TYPE_MAP, params.living_situation, "living_situation"),
            "energy_level": map_value(ENERGY_LEVEL_MAP, params.activity_level, "activity_level"),
            "experience_level": map_value(EXPERIENCE_MAP, params.experience, "experience"),
        }
        compatibility = {
            "good_with_kids": params.has_children,
            "good_with_dogs": params.has_other_dogs,
            "good_with_cats": params.has_cats,
        }
        criteria.update({k: v for k, v in compatibility.items() if v is not None})

        dogs = (
            await self.client.search_dogs(
                available_to_country=self._country(params.adoptable_to_country),
                limit=params.limit,
                **criteria,
            )
        ).unwrap()
        enhanced = await self._bulk_enhanced(dogs)

        if params.response_format == ResponseFormat.JSON:
            return ToolResponse.text(
                _to_json(
                    {
                        "count": len(dogs),
                        "matched_criteria": criteria,
                        "dogs": [_with_enhanced(dog, enhanced.get(dog.id)) for dog in dogs],
                    }
                )
            )

        header = self._preferences_header(params)
        response = ToolResponse.text(
            header + format_dog_list(dogs, enhanced, offset=0, limit=params.limit)
        )
        if params.include_images and dogs:
            response.content.extend(await self._image_blocks(dogs, ImagePreset.THUMBNAIL))
        return response

    @staticmethod
    def _preferences_header(params: MatchPreferencesInput) -> str:
        lines = [
            "# Dogs Matching Your Preferences",
            "",
            "**Your Profile:**",
            f"- Living Situation: {params.living_situation.replace('_', ' ')}",
            f"- Activity Level: {params.activity_level}",
            f"- Experience: {params.experience.replace('_', ' ')}",
        ]
        if params.adoptable_to_country:
            lines.append(f"- Adopting to: {params.adoptable_to_country}")
        for label, value in (
            ("Has Children", params.has_children),
            ("Has Other Dogs", params.has_other_dogs),
            ("Has Cats", params.has_cats),
        ):
            if value is not None:
                lines.append(f"- {label}: {'Yes' if value else 'No'}")
        return "\n".join(lines) + "\n\n"

    @tool_errors
    async def get_adoption_guide(self, params: GetAdoptionGuideInput) -> ToolResponse:
        return ToolResponse.text(get_adoption_guide(params.topic, params.country))

    # Listings used by the command line

    @tool_errors
    async def list_breed_names(
        self,
        breed_group: Optional[str] = None,
        response_format: ResponseFormat = ResponseFormat.MARKDOWN,
    ) -> ToolResponse:
        names = (await self.client.get_breeds(breed_group)).unwrap()
        if response_format == ResponseFormat.JSON:
            return ToolResponse.text(_to_json(names))
        return ToolResponse.text(format_breed_names(names, breed_group))

    @tool_errors
    async def list_enhanced_organizations(
        self,
        response_format: ResponseFormat = ResponseFormat.MARKDOWN,
    ) -> ToolResponse:
        orgs = (await self.client.get_enhanced_organizations()).unwrap()
        if response_format == ResponseFormat.JSON:
            return ToolResponse.text(_to_json([org.to_dict() for org in orgs]))
        return ToolResponse.text(format_organizations(orgs))
