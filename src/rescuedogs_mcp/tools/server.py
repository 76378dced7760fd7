"""
MCP server exposing the rescue dogs tools over stdio.

Registers one FastMCP tool per service method. All logging goes to stderr
because stdout carries the MCP protocol stream.
"""

import json
import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import ImageContent as MCPImageContent
from mcp.types import TextContent
from pydantic import ValidationError as SchemaError

from rescuedogs_mcp.core.models import ImageContent, ImagePreset, ResponseFormat
from rescuedogs_mcp.tools.schemas import (
    ActiveOnlyParam,
    ActivityLevelParam,
    AdoptableToCountryParam,
    AgeCategoryParam,
    BreedGroupParam,
    BreedLimitParam,
    BreedParam,
    CurrentFiltersParam,
    EnergyLevelParam,
    ExperienceLevelParam,
    ExperienceParam,
    GetAdoptionGuideInput,
    GetDogDetailsInput,
    GetFilterCountsInput,
    GetStatisticsInput,
    GoodWithCatsParam,
    GoodWithDogsParam,
    GoodWithKidsParam,
    GuideCountryParam,
    GuideTopicParam,
    HasCatsParam,
    HasChildrenParam,
    HasOtherDogsParam,
    HomeTypeParam,
    ImagePresetParam,
    IncludeImageParam,
    IncludeImagesParam,
    ListBreedsInput,
    ListOrganizationsInput,
    LivingSituationParam,
    MatchLimitParam,
    MatchPreferencesInput,
    MinCountParam,
    OffsetParam,
    OrganizationIdParam,
    OrgCountryParam,
    OrgLimitParam,
    QueryParam,
    ResponseFormatParam,
    SearchDogsInput,
    SearchLimitParam,
    SexParam,
    SizeParam,
    SlugParam,
)
from rescuedogs_mcp.tools.service import RescueDogsService, ToolResponse

SERVER_NAME = "rescuedogs-mcp-server"

logger = logging.getLogger(__name__)
call_logger = logging.getLogger("rescuedogs_mcp.calls")


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr so the stdio transport stays clean."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def to_mcp_content(response: ToolResponse) -> list[Any]:
    """Convert a service response into MCP content blocks."""
    blocks: list[Any] = []
    for block in response.content:
        if isinstance(block, ImageContent):
            blocks.append(MCPImageContent(type="image", data=block.data, mimeType=block.mime_type))
        else:
            blocks.append(TextContent(type="text", text=block))
    return blocks


async def run_tool(tool_name: str, call: Awaitable[ToolResponse]) -> list[Any]:
    """Await a service call, log one JSON line for it, and map errors.

    Raises:
        ToolError: If the service returned an error response.
    """
    start = time.perf_counter()
    status = "error"
    try:
        response = await call
        if response.is_error:
            raise ToolError("\n".join(response.texts))
        status = "ok"
        return to_mcp_content(response)
    finally:
        call_logger.info(
            json.dumps(
                {
                    "tool": tool_name,
                    "status": status,
                    "duration_ms": round((time.perf_counter() - start) * 1000),
                }
            )
        )


def _validated(model: Any, **values: Any) -> Any:
    try:
        return model(**values)
    except SchemaError as e:
        raise ToolError(f"Error: Invalid input: {e}") from None


def create_server(service: RescueDogsService) -> FastMCP:
    """Build the FastMCP server with every tool registered.

    Args:
        service: Service that implements the tools. The server starts the
                 cache sweeper on startup and closes the HTTP clients on
                 shutdown.

    Returns:
        The configured FastMCP instance.
    """

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        service.cache.start_sweeper()
        logger.info("%s ready (api=%s)", SERVER_NAME, service.client.base_url)
        try:
            yield
        finally:
            await service.cache.stop_sweeper()
            await service.close()

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)

    @mcp.tool(
        name="rescuedogs_search_dogs",
        description=(
            "Search for rescue dogs available for adoption from European and UK "
            "organizations. Returns matching dogs with basic info. Use "
            "rescuedogs_get_dog_details for full profiles."
        ),
    )
    async def search_dogs(
        query: QueryParam = None,
        breed: BreedParam = None,
        breed_group: BreedGroupParam = None,
        size: SizeParam = None,
        age_category: AgeCategoryParam = None,
        sex: SexParam = None,
        energy_level: EnergyLevelParam = None,
        experience_level: ExperienceLevelParam = None,
        home_type: HomeTypeParam = None,
        adoptable_to_country: AdoptableToCountryParam = None,
        organization_id: OrganizationIdParam = None,
        good_with_kids: GoodWithKidsParam = None,
        good_with_dogs: GoodWithDogsParam = None,
        good_with_cats: GoodWithCatsParam = None,
        limit: SearchLimitParam = 10,
        offset: OffsetParam = 0,
        include_images: IncludeImagesParam = False,
        image_preset: ImagePresetParam = ImagePreset.THUMBNAIL,
        response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
    ):
        params = _validated(
            SearchDogsInput,
            query=query,
            breed=breed,
            breed_group=breed_group,
            size=size,
            age_category=age_category,
            sex=sex,
            energy_level=energy_level,
            experience_level=experience_level,
            home_type=home_type,
            adoptable_to_country=adoptable_to_country,
            organization_id=organization_id,
            good_with_kids=good_with_kids,
            good_with_dogs=good_with_dogs,
            good_with_cats=good_with_cats,
            limit=limit,
            offset=offset,
            include_images=include_images,
            image_preset=image_preset,
            response_format=response_format,
        )
        return await run_tool("rescuedogs_search_dogs", service.search_dogs(params))

    @mcp.tool(
        name="rescuedogs_get_dog_details",
        description=(
            "Get full details for a specific rescue dog including AI-generated "
            "personality profile, requirements, and adoption info."
        ),
    )
    async def get_dog_details(
        slug: SlugParam,
        include_image: IncludeImageParam = True,
        image_preset: ImagePresetParam = ImagePreset.MEDIUM,
        response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
    ):
        params = _validated(
            GetDogDetailsInput,
            slug=slug,
            include_image=include_image,
            image_preset=image_preset,
            response_format=response_format,
        )
        return await run_tool("rescuedogs_get_dog_details", service.get_dog_details(params))

    @mcp.tool(
        name="rescuedogs_list_breeds",
        description=(
            "Get available breeds with counts and statistics. Shows which breeds "
            "have dogs available for adoption."
        ),
    )
    async def list_breeds(
        breed_group: BreedGroupParam = None,
        min_count: MinCountParam = 1,
        limit: BreedLimitParam = 20,
        response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
    ):
        params = _validated(
            ListBreedsInput,
            breed_group=breed_group,
            min_count=min_count,
            limit=limit,
            response_format=response_format,
        )
        return await run_tool("rescuedogs_list_breeds", service.list_breeds(params))

    @mcp.tool(
        name="rescuedogs_get_statistics",
        description="Get overall statistics about available rescue dogs on the platform.",
    )
    async def get_statistics(response_format: ResponseFormatParam = ResponseFormat.MARKDOWN):
        params = _validated(GetStatisticsInput, response_format=response_format)
        return await run_tool("rescuedogs_get_statistics", service.get_statistics(params))

    @mcp.tool(
        name="rescuedogs_get_filter_counts",
        description=(
            "Get available filter options with counts based on current filter "
            "context. Use this to show users valid filter choices that won't "
            "result in empty searches."
        ),
    )
    async def get_filter_counts(
        current_filters: CurrentFiltersParam = None,
        response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
    ):
        params = _validated(
            GetFilterCountsInput,
            current_filters=current_filters,
            response_format=response_format,
        )
        return await run_tool("rescuedogs_get_filter_counts", service.get_filter_counts(params))

    @mcp.tool(
        name="rescuedogs_list_organizations",
        description="List rescue organizations with their statistics and available dogs count.",
    )
    async def list_organizations(
        country: OrgCountryParam = None,
        active_only: ActiveOnlyParam = True,
        limit: OrgLimitParam = 20,
        response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
    ):
        params = _validated(
            ListOrganizationsInput,
            country=country,
            active_only=active_only,
            limit=limit,
            response_format=response_format,
        )
        return await run_tool(
            "rescuedogs_list_organizations", service.list_organizations(params)
        )

    @mcp.tool(
        name="rescuedogs_match_preferences",
        description=(
            "Find dogs that match your lifestyle preferences. Translates your living "
            "situation, activity level, and experience into appropriate filters."
        ),
    )
    async def match_preferences(
        living_situation: LivingSituationParam,
        activity_level: ActivityLevelParam,
        experience: ExperienceParam,
        has_children: HasChildrenParam = None,
        has_other_dogs: HasOtherDogsParam = None,
        has_cats: HasCatsParam = None,
        adoptable_to_country: AdoptableToCountryParam = None,
        limit: MatchLimitParam = 5,
        include_images: IncludeImagesParam = False,
        response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
    ):
        params = _validated(
            MatchPreferencesInput,
            living_situation=living_situation,
            activity_level=activity_level,
            experience=experience,
            has_children=has_children,
            has_other_dogs=has_other_dogs,
            has_cats=has_cats,
            adoptable_to_country=adoptable_to_country,
            limit=limit,
            include_images=include_images,
            response_format=response_format,
        )
        return await run_tool("rescuedogs_match_preferences", service.match_preferences(params))

    @mcp.tool(
        name="rescuedogs_get_adoption_guide",
        description=(
            "Get information about the rescue dog adoption process including "
            "transport, fees, requirements, and timeline."
        ),
    )
    async def get_adoption_guide(
        topic: GuideTopicParam = "overview",
        country: GuideCountryParam = None,
    ):
        params = _validated(GetAdoptionGuideInput, topic=topic, country=country)
        return await run_tool("rescuedogs_get_adoption_guide", service.get_adoption_guide(params))

    return mcp
