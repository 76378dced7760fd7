"""
Main CLI entry point for rescuedogs-mcp.

Provides the ``serve`` command that runs the MCP server over stdio, plus
query commands that call the same tools directly and print the result.
"""

import asyncio
import sys
from typing import Awaitable, Callable, Optional

import click
from pydantic import ValidationError as SchemaError

from rescuedogs_mcp import __version__
from rescuedogs_mcp.cli.output import print_error, print_info, print_response
from rescuedogs_mcp.config import DEFAULT_API_URL, DEFAULT_IMAGE_URL, Settings
from rescuedogs_mcp.core.exceptions import RescueDogsError
from rescuedogs_mcp.core.models import ResponseFormat
from rescuedogs_mcp.reports.guides import GUIDE_TOPICS
from rescuedogs_mcp.tools.schemas import (
    CurrentFilters,
    GetAdoptionGuideInput,
    GetDogDetailsInput,
    GetFilterCountsInput,
    GetStatisticsInput,
    ListBreedsInput,
    ListOrganizationsInput,
    MatchPreferencesInput,
    SearchDogsInput,
)
from rescuedogs_mcp.tools.service import RescueDogsService, ToolResponse

SIZES = ["Tiny", "Small", "Medium", "Large", "XLarge"]
AGES = ["puppy", "young", "adult", "senior"]
SEXES = ["male", "female"]

json_option = click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print structured JSON instead of markdown.",
)


def run_async(coro):
    """Run an async coroutine to completion."""
    return asyncio.run(coro)


def _format(as_json: bool) -> ResponseFormat:
    return ResponseFormat.JSON if as_json else ResponseFormat.MARKDOWN


async def _call(
    settings: Settings,
    method: Callable[[RescueDogsService], Awaitable[ToolResponse]],
) -> ToolResponse:
    service = RescueDogsService.from_settings(settings)
    try:
        return await method(service)
    finally:
        await service.close()


def _invoke(
    ctx: click.Context,
    method: Callable[[RescueDogsService], Awaitable[ToolResponse]],
    as_json: bool = False,
) -> None:
    """Run one service call, print its response, and exit non-zero on error."""
    response = run_async(_call(ctx.obj["settings"], method))
    if response.is_error:
        print_error("\n".join(response.texts).removeprefix("Error: "))
        sys.exit(1)
    print_response(response, raw=as_json)


def _params(model, **values):
    """Build a tool input model, reporting bad option values as usage errors."""
    try:
        return model(**values)
    except SchemaError as e:
        raise click.UsageError(str(e)) from None


@click.group()
@click.version_option(version=__version__, prog_name="rescuedogs-mcp")
@click.option(
    "--api-url",
    envvar="RESCUEDOGS_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
    help="Base URL of the rescue dogs API.",
)
@click.option(
    "--image-url",
    envvar="RESCUEDOGS_IMAGE_URL",
    default=DEFAULT_IMAGE_URL,
    show_default=True,
    help="Base URL of the image CDN.",
)
@click.option(
    "--log-level",
    envvar="RESCUEDOGS_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Log level for stderr logging.",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str, image_url: str, log_level: str) -> None:
    """Rescue dogs MCP server - find rescue dogs from European and UK rescues.

    Run ``serve`` to expose the tools to an MCP client over stdio, or use the
    query commands to call them from the terminal.
    """
    from rescuedogs_mcp.tools.server import configure_logging

    try:
        env = Settings.from_env()
    except RescueDogsError as e:
        print_error(str(e))
        sys.exit(2)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings(
        api_url=api_url,
        image_url=image_url,
        log_level=log_level.upper(),
        retry_delay=env.retry_delay,
    )
    configure_logging(log_level)


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server on stdio.

    \b
    Example client configuration:
        {"command": "rescuedogs-mcp", "args": ["serve"]}
    """
    from rescuedogs_mcp.tools.server import create_server

    settings: Settings = ctx.obj["settings"]
    service = RescueDogsService.from_settings(settings)
    create_server(service).run()


@cli.command()
@click.argument("query", required=False)
@click.option("--breed", help="Breed name, e.g. 'Golden Retriever'.")
@click.option("--breed-group", help="FCI breed group, e.g. 'Herding'.")
@click.option("--size", type=click.Choice(SIZES), help="Standardized size.")
@click.option("--age", "age_category", type=click.Choice(AGES), help="Age category.")
@click.option("--sex", type=click.Choice(SEXES), help="Sex.")
@click.option("--country", "-c", help="ISO code of the country you adopt to.")
@click.option("--org-id", type=int, help="Rescue organization ID.")
@click.option("--limit", "-n", type=int, default=10, show_default=True)
@click.option("--offset", type=int, default=0, show_default=True)
@click.option("--images", is_flag=True, help="Fetch thumbnails for the first results.")
@json_option
@click.pass_context
def search(
    ctx: click.Context,
    query: Optional[str],
    breed: Optional[str],
    breed_group: Optional[str],
    size: Optional[str],
    age_category: Optional[str],
    sex: Optional[str],
    country: Optional[str],
    org_id: Optional[int],
    limit: int,
    offset: int,
    images: bool,
    as_json: bool,
) -> None:
    """Search available rescue dogs.

    QUERY is free text; if it names a rescue organization, that
    organization's dogs are listed instead.

    \b
    Examples:
        rescuedogs-mcp search --size Small --country GB
        rescuedogs-mcp search "collie" --age young -n 5
    """
    params = _params(
        SearchDogsInput,
        query=query,
        breed=breed,
        breed_group=breed_group,
        size=size,
        age_category=age_category,
        sex=sex,
        adoptable_to_country=country,
        organization_id=org_id,
        limit=limit,
        offset=offset,
        include_images=images,
        response_format=_format(as_json),
    )
    _invoke(ctx, lambda service: service.search_dogs(params), as_json)


@cli.command()
@click.argument("slug")
@click.option("--no-image", is_flag=True, help="Skip fetching the photo.")
@json_option
@click.pass_context
def dog(ctx: click.Context, slug: str, no_image: bool, as_json: bool) -> None:
    """Show the full profile of the dog with the given SLUG."""
    params = _params(
        GetDogDetailsInput,
        slug=slug,
        include_image=not no_image,
        response_format=_format(as_json),
    )
    _invoke(ctx, lambda service: service.get_dog_details(params), as_json)


@cli.command()
@click.option("--group", "breed_group", help="Only breeds in this FCI group.")
@click.option("--min-count", type=int, default=1, show_default=True)
@click.option("--limit", "-n", type=int, default=20, show_default=True)
@json_option
@click.pass_context
def breeds(
    ctx: click.Context,
    breed_group: Optional[str],
    min_count: int,
    limit: int,
    as_json: bool,
) -> None:
    """Show breed statistics."""
    params = _params(
        ListBreedsInput,
        breed_group=breed_group,
        min_count=min_count,
        limit=limit,
        response_format=_format(as_json),
    )
    _invoke(ctx, lambda service: service.list_breeds(params), as_json)


@cli.command("breed-names")
@click.option("--group", "breed_group", help="Only breeds in this FCI group.")
@json_option
@click.pass_context
def breed_names(ctx: click.Context, breed_group: Optional[str], as_json: bool) -> None:
    """List the names of breeds with available dogs."""
    _invoke(
        ctx,
        lambda service: service.list_breed_names(breed_group, _format(as_json)),
        as_json,
    )


@cli.command()
@json_option
@click.pass_context
def stats(ctx: click.Context, as_json: bool) -> None:
    """Show platform-wide statistics."""
    params = _params(GetStatisticsInput, response_format=_format(as_json))
    _invoke(ctx, lambda service: service.get_statistics(params), as_json)


@cli.command()
@click.option("--breed", help="Current breed filter.")
@click.option("--size", type=click.Choice(SIZES), help="Current size filter.")
@click.option("--age", "age_category", type=click.Choice(AGES), help="Current age filter.")
@click.option("--sex", type=click.Choice(SEXES), help="Current sex filter.")
@click.option("--country", "-c", help="Current destination country filter.")
@json_option
@click.pass_context
def filters(
    ctx: click.Context,
    breed: Optional[str],
    size: Optional[str],
    age_category: Optional[str],
    sex: Optional[str],
    country: Optional[str],
    as_json: bool,
) -> None:
    """Show filter options with dog counts for the current filters."""
    current = _params(
        CurrentFilters,
        breed=breed,
        size=size,
        age_category=age_category,
        sex=sex,
        adoptable_to_country=country,
    )
    params = _params(
        GetFilterCountsInput,
        current_filters=current,
        response_format=_format(as_json),
    )
    _invoke(ctx, lambda service: service.get_filter_counts(params), as_json)


@cli.command()
@click.option("--country", "-c", help="Only organizations in this country.")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive organizations.")
@click.option("--limit", "-n", type=int, default=20, show_default=True)
@click.option("--enhanced", is_flag=True, help="Use the enhanced listing with dog counts.")
@json_option
@click.pass_context
def orgs(
    ctx: click.Context,
    country: Optional[str],
    include_inactive: bool,
    limit: int,
    enhanced: bool,
    as_json: bool,
) -> None:
    """List rescue organizations."""
    if enhanced:
        if country or include_inactive:
            print_info("--country and --all are ignored with --enhanced.")
        _invoke(
            ctx,
            lambda service: service.list_enhanced_organizations(_format(as_json)),
            as_json,
        )
        return

    params = _params(
        ListOrganizationsInput,
        country=country,
        active_only=not include_inactive,
        limit=limit,
        response_format=_format(as_json),
    )
    _invoke(ctx, lambda service: service.list_organizations(params), as_json)


@cli.command()
@click.option(
    "--living",
    "living_situation",
    required=True,
    type=click.Choice(["apartment", "house_small_garden", "house_large_garden", "rural"]),
)
@click.option(
    "--activity",
    "activity_level",
    required=True,
    type=click.Choice(["sedentary", "moderate", "active", "very_active"]),
)
@click.option(
    "--experience",
    required=True,
    type=click.Choice(["first_time", "some", "experienced"]),
)
@click.option("--children/--no-children", "has_children", default=None)
@click.option("--dogs/--no-dogs", "has_other_dogs", default=None)
@click.option("--cats/--no-cats", "has_cats", default=None)
@click.option("--country", "-c", help="ISO code of the country you adopt to.")
@click.option("--limit", "-n", type=int, default=5, show_default=True)
@json_option
@click.pass_context
def match(
    ctx: click.Context,
    living_situation: str,
    activity_level: str,
    experience: str,
    has_children: Optional[bool],
    has_other_dogs: Optional[bool],
    has_cats: Optional[bool],
    country: Optional[str],
    limit: int,
    as_json: bool,
) -> None:
    """Find dogs that suit your home and lifestyle.

    \b
    Example:
        rescuedogs-mcp match --living apartment --activity moderate \\
            --experience first_time --cats -c GB
    """
    params = _params(
        MatchPreferencesInput,
        living_situation=living_situation,
        activity_level=activity_level,
        experience=experience,
        has_children=has_children,
        has_other_dogs=has_other_dogs,
        has_cats=has_cats,
        adoptable_to_country=country,
        limit=limit,
        response_format=_format(as_json),
    )
    _invoke(ctx, lambda service: service.match_preferences(params), as_json)


@cli.command()
@click.argument("topic", type=click.Choice(GUIDE_TOPICS), default="overview")
@click.option("--country", "-c", help="Add country-specific notes (GB, IE, DE, FR).")
@click.pass_context
def guide(ctx: click.Context, topic: str, country: Optional[str]) -> None:
    """Show the adoption guide for TOPIC (default: overview)."""
    params = _params(GetAdoptionGuideInput, topic=topic, country=country)
    _invoke(ctx, lambda service: service.get_adoption_guide(params))
