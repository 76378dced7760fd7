"""
Markdown formatters for tool output.

Turns parsed API models into the markdown text returned to MCP clients.
All long outputs pass through ``truncate_if_needed`` so a single response
never exceeds ``CHARACTER_LIMIT``.
"""

from typing import Optional, Union

from rescuedogs_mcp.core.models import (
    BreedStats,
    Dog,
    DogProfilerData,
    EnhancedDogData,
    FilterCounts,
    FilterOption,
    Organization,
    QualifyingBreed,
    Statistics,
)

CHARACTER_LIMIT = 25000
TRUNCATION_NOTICE = "\n\n... (truncated due to length limit)"

# Display limits
MAX_IMAGES = 5
MAX_BREED_TRAITS = 3
MAX_STATS_COUNTRIES = 8
MAX_STATS_ORGANIZATIONS = 5
MAX_FILTER_COUNTRIES = 15
MAX_FILTER_BREEDS = 10

PROFILE_URL = "https://www.rescuedogs.me/dogs/{slug}"

NO_DOGS_FOUND = """# No Dogs Found

No dogs found matching your criteria.

**Suggestions:**
- Use `rescuedogs_get_filter_counts` to see available filter options
- Try removing some filters to broaden your search
- Check `rescuedogs_list_organizations` to find organizations with available dogs

*Note: We aggregate dogs from European and UK rescues only.*"""

ProfileData = Union[EnhancedDogData, DogProfilerData]


def truncate_if_needed(text: str, limit: int = CHARACTER_LIMIT) -> str:
    """Cut text that exceeds the response size limit and mark it truncated."""
    if len(text) <= limit:
        return text
    return text[: limit - 100] + TRUNCATION_NOTICE


def format_enum_value(value: str) -> str:
    """Render a snake_case backend value as title case ("first_time_ok" -> "First Time Ok")."""
    return " ".join(word[:1].upper() + word[1:] for word in value.split("_"))


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _about_text(data: ProfileData) -> Optional[str]:
    if isinstance(data, EnhancedDogData):
        return data.bio or data.enhanced_description
    return data.bio or data.description


def _profile_sections(data: ProfileData, parts: list[str]) -> None:
    """Append the profile sections shared by enrichment and embedded profile data."""
    about = _about_text(data)
    if about:
        parts.extend(["## About", "", about, ""])

    if data.personality_traits:
        parts.extend(["## Personality", "", _bullets(data.personality_traits), ""])

    if data.interests:
        parts.extend(["## Interests", "", _bullets(data.interests), ""])

    if data.looking_for:
        parts.extend(["## Looking For", "", data.looking_for, ""])

    if data.energy_level or data.home_type or data.experience_level:
        parts.extend(["## Requirements", ""])
        if data.energy_level:
            parts.append(f"- **Energy Level:** {format_enum_value(data.energy_level)}")
        if data.home_type:
            parts.append(f"- **Home Type:** {format_enum_value(data.home_type)}")
        if data.experience_level:
            parts.append(f"- **Experience Needed:** {format_enum_value(data.experience_level)}")
        parts.append("")

    if data.deal_breakers:
        parts.extend(["## Important Notes", "", _bullets(data.deal_breakers), ""])

    if data.fun_fact:
        parts.extend(["## Fun Fact", "", data.fun_fact, ""])


def format_dog(dog: Dog, enhanced: Optional[EnhancedDogData] = None) -> str:
    """Format a full dog profile.

    Args:
        dog: The dog record.
        enhanced: Enrichment data. When absent, the profile embedded in the
                  dog record is used instead.

    Returns:
        Markdown profile ending with the adoption link.
    """
    parts = [f"# {dog.name}", ""]

    if enhanced and enhanced.tagline:
        parts.extend([f"*{enhanced.tagline}*", ""])

    parts.extend(["## Basic Information", ""])
    if dog.display_breed:
        parts.append(f"- **Breed:** {dog.display_breed}")
    if dog.age_text:
        parts.append(f"- **Age:** {dog.age_text}")
    if dog.sex:
        parts.append(f"- **Sex:** {dog.sex}")
    if dog.display_size:
        parts.append(f"- **Size:** {dog.display_size}")
    if dog.breed_group:
        parts.append(f"- **Breed Group:** {dog.breed_group}")
    parts.append("")

    if enhanced:
        _profile_sections(enhanced, parts)
    elif dog.dog_profiler_data:
        _profile_sections(dog.dog_profiler_data, parts)

    org = dog.organization
    if org:
        parts.extend(["## Rescue Organization", "", f"- **Name:** {org.name}"])
        if org.city and org.country:
            parts.append(f"- **Location:** {org.city}, {org.country}")
        if org.website_url:
            parts.append(f"- **Website:** {org.website_url}")
        parts.append("")

    parts.extend(
        [
            "## Adoption",
            "",
            f"**Apply to adopt {dog.name}:** {dog.adoption_url}",
            "",
            f"*View full profile on rescuedogs.me: {PROFILE_URL.format(slug=dog.slug)}*",
        ]
    )
    return truncate_if_needed("\n".join(parts))


def format_dog_list(
    dogs: list[Dog],
    enhanced: Optional[dict[int, EnhancedDogData]] = None,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
) -> str:
    """Format a list of search results.

    Args:
        dogs: Dogs to list.
        enhanced: Enrichment data keyed by dog id.
        offset: Pagination offset; with ``limit``, adds a "Showing" footer.
        limit: Page size used for the request.

    Returns:
        Markdown list, or the empty-state message with search suggestions.
    """
    if not dogs:
        return NO_DOGS_FOUND

    enhanced = enhanced or {}
    parts = [f"# Search Results ({len(dogs)} dogs)", ""]

    for dog in dogs:
        extra = enhanced.get(dog.id)
        parts.append(f"## {dog.name}")
        if extra and extra.tagline:
            parts.append(f"*{extra.tagline}*")
        parts.append("")

        details = []
        if dog.display_breed:
            details.append(f"**Breed:** {dog.display_breed}")
        if dog.age_text:
            details.append(f"**Age:** {dog.age_text}")
        if dog.sex:
            details.append(f"**Sex:** {dog.sex}")
        if dog.standardized_size:
            details.append(f"**Size:** {dog.standardized_size}")
        parts.extend([" | ".join(details), ""])

        if dog.organization:
            parts.append(f"**From:** {dog.organization.name} ({dog.organization.country})")
        parts.append(f'**Details:** `rescuedogs_get_dog_details(slug: "{dog.slug}")`')
        parts.extend([f"**Adopt:** {dog.adoption_url}", "", "---", ""])

    if offset is not None and limit is not None:
        start = offset + 1
        end = offset + len(dogs)
        more = " More results available - increase offset to see more." if len(dogs) == limit else ""
        parts.extend([f"*Showing {start}-{end}.{more}*", ""])

    parts.append("*Use rescuedogs_get_dog_details to see the full profile for any dog.*")
    return truncate_if_needed("\n".join(parts))


def _breed_details(breed: QualifyingBreed, parts: list[str]) -> None:
    if breed.breed_group:
        parts.append(f"- **Group:** {breed.breed_group}")
    if breed.breed_type:
        parts.append(f"- **Type:** {breed.breed_type}")
    if breed.personality_traits:
        traits = ", ".join(breed.personality_traits[:MAX_BREED_TRAITS])
        parts.append(f"- **Traits:** {traits}")
    if breed.organization_count > 0:
        parts.append(f"- **Available from:** {breed.organization_count} organizations")


def format_breed_stats(stats: BreedStats, limit: Optional[int] = None) -> str:
    """Format breed statistics, listing at most ``limit`` breeds."""
    parts = [
        "# Available Breeds",
        "",
        f"**Total Dogs:** {stats.total_dogs:,}",
        f"**Unique Breeds:** {stats.unique_breeds:,}",
        f"**Purebred:** {stats.purebred_count:,}",
        f"**Crossbreed/Mixed:** {stats.crossbreed_count:,}",
        "",
    ]

    if stats.breed_groups:
        parts.extend(["## Breed Groups", ""])
        parts.extend(f"- **{group.name}:** {group.count} dogs" for group in stats.breed_groups)
        parts.append("")

    breeds = stats.qualifying_breeds[:limit] if limit else stats.qualifying_breeds
    if breeds:
        parts.extend(["## Top Breeds", ""])
        for breed in breeds:
            parts.extend([f"### {breed.primary_breed} ({breed.count} dogs)", ""])
            _breed_details(breed, parts)
            parts.append("")

    return truncate_if_needed("\n".join(parts))


def format_breed_names(names: list[str], breed_group: Optional[str] = None) -> str:
    """Format a plain list of breed names."""
    if not names:
        return "No breeds found."
    title = f"# Breeds ({breed_group})" if breed_group else "# Breeds"
    parts = [title, "", f"{len(names)} breeds with available dogs.", "", _bullets(names)]
    return truncate_if_needed("\n".join(parts))


def format_organization(org: Organization) -> str:
    parts = [f"## {org.name}", ""]
    if org.description:
        parts.extend([org.description, ""])

    parts.extend(
        [
            "### Details",
            "",
            f"- **Location:** {org.city}, {org.country}",
            f"- **Dogs Available:** {org.total_dogs}",
        ]
    )
    if org.new_this_week > 0:
        parts.append(f"- **New This Week:** {org.new_this_week}")
    if org.ships_to:
        parts.append(f"- **Ships To:** {', '.join(org.ships_to)}")
    if org.website_url:
        parts.append(f"- **Website:** {org.website_url}")
    parts.append("")

    return "\n".join(parts)


def format_organizations(orgs: list[Organization]) -> str:
    """Format a list of rescue organizations."""
    if not orgs:
        return "No organizations found matching your criteria."

    parts = [f"# Rescue Organizations ({len(orgs)})", ""]
    for org in orgs:
        parts.extend([format_organization(org), "---", ""])
    return truncate_if_needed("\n".join(parts))


def format_statistics(stats: Statistics) -> str:
    """Format platform statistics with derived totals."""
    parts = [
        "# Rescue Dogs Statistics",
        "",
        "## Overview",
        "",
        f"- **Available Dogs:** {stats.total_dogs:,}",
        f"- **Rescue Organizations:** {stats.total_organizations}",
        f"- **Countries Covered:** {len(stats.countries)}",
        f"- **New This Week:** {stats.new_this_week}",
        "",
    ]

    if stats.countries:
        parts.extend(["## Dogs by Country", ""])
        parts.extend(
            f"- **{c.country}:** {c.count} dogs" for c in stats.countries[:MAX_STATS_COUNTRIES]
        )
        parts.append("")

    if stats.organizations:
        parts.extend(["## Top Organizations", ""])
        parts.extend(
            f"- **{org.name}** ({org.country}): {org.dog_count} dogs"
            for org in stats.organizations[:MAX_STATS_ORGANIZATIONS]
        )
        parts.append("")

    parts.append("*Data from rescuedogs.me - European & UK rescue dog aggregator*")
    return "\n".join(parts)


def _option_lines(options: list[FilterOption]) -> list[str]:
    return [f"- {opt.label}: {opt.count} dogs" for opt in options]


def format_filter_counts(counts: FilterCounts) -> str:
    """Format filter options; destination countries are listed by count, highest first."""
    parts = ["# Available Filter Options", ""]

    for title, options in (
        ("Size", counts.size_options),
        ("Age", counts.age_options),
        ("Sex", counts.sex_options),
    ):
        if options:
            parts.append(f"## {title}")
            parts.extend(_option_lines(options))
            parts.append("")

    countries = counts.countries_by_count
    if countries:
        parts.append("## Available To (Countries)")
        parts.extend(_option_lines(countries[:MAX_FILTER_COUNTRIES]))
        if len(countries) > MAX_FILTER_COUNTRIES:
            parts.append(f"- *...and {len(countries) - MAX_FILTER_COUNTRIES} more countries*")
        parts.append("")

    if counts.breed_options:
        parts.append("## Top Breeds")
        parts.extend(_option_lines(counts.breed_options[:MAX_FILTER_BREEDS]))
        parts.append("")

    return truncate_if_needed("\n".join(parts))
