"""
Core data models for the rescue dogs MCP server.

This module defines the typed payloads returned by the upstream rescue dogs
API. Each model is parsed from the raw JSON with ``from_dict`` at the client
boundary and converted back with ``to_dict`` for structured (JSON) output.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from rescuedogs_mcp.core.exceptions import ValidationError


class ResponseFormat(Enum):
    """Output format requested by a tool caller."""

    MARKDOWN = "markdown"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


class ImagePreset(Enum):
    """Named CDN transform presets."""

    THUMBNAIL = "thumbnail"  # 200x200, q70
    MEDIUM = "medium"  # 400x400, q75

    def __str__(self) -> str:
        return self.value

    @property
    def transform(self) -> str:
        """Return the CDN transform specification for this preset."""
        transforms = {
            ImagePreset.THUMBNAIL: "w=200,h=200,fit=cover,q=70,f=jpeg",
            ImagePreset.MEDIUM: "w=400,h=400,fit=cover,q=75,f=jpeg",
        }
        return transforms[self]


def _require(data: dict[str, Any], key: str, entity: str) -> Any:
    """Fetch a mandatory field from an upstream payload."""
    if not isinstance(data, dict):
        raise ValidationError(entity, type(data).__name__, "Expected a JSON object")
    value = data.get(key)
    if value is None:
        raise ValidationError(f"{entity}.{key}", "null", "Required field is missing")
    return value


def _str_list(value: Any) -> list[str]:
    if not value:
        return []
    return [str(v) for v in value]


@dataclass
class DogProfilerData:
    """Profile data embedded in a dog record."""

    description: str | None = None
    tagline: str | None = None
    bio: str | None = None
    looking_for: str | None = None
    personality_traits: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)
    deal_breakers: list[str] = field(default_factory=list)
    fun_fact: str | None = None
    energy_level: str | None = None
    home_type: str | None = None
    experience_level: str | None = None
    quality_score: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "DogProfilerData":
        return cls(
            description=data.get("description"),
            tagline=data.get("tagline"),
            bio=data.get("bio"),
            looking_for=data.get("looking_for"),
            personality_traits=_str_list(data.get("personality_traits")),
            interests=_str_list(data.get("interests")),
            deal_breakers=_str_list(data.get("deal_breakers")),
            fun_fact=data.get("fun_fact"),
            energy_level=data.get("energy_level"),
            home_type=data.get("home_type"),
            experience_level=data.get("experience_level"),
            quality_score=data.get("quality_score"),
        )


@dataclass
class EnhancedDogData:
    """Supplementary descriptive data for a dog, fetched separately."""

    id: int
    enhanced_description: str | None = None
    tagline: str | None = None
    bio: str | None = None
    looking_for: str | None = None
    personality_traits: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)
    deal_breakers: list[str] = field(default_factory=list)
    fun_fact: str | None = None
    energy_level: str | None = None
    home_type: str | None = None
    experience_level: str | None = None
    quality_score: float | None = None
    good_with_kids: bool | None = None
    good_with_dogs: bool | None = None
    good_with_cats: bool | None = None
    good_with_strangers: bool | None = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "EnhancedDogData":
        return cls(
            id=int(_require(data, "id", "enhanced_dog")),
            enhanced_description=data.get("enhanced_description"),
            tagline=data.get("tagline"),
            bio=data.get("bio"),
            looking_for=data.get("looking_for"),
            personality_traits=_str_list(data.get("personality_traits")),
            interests=_str_list(data.get("interests")),
            deal_breakers=_str_list(data.get("deal_breakers")),
            fun_fact=data.get("fun_fact"),
            energy_level=data.get("energy_level"),
            home_type=data.get("home_type"),
            experience_level=data.get("experience_level"),
            quality_score=data.get("quality_score"),
            good_with_kids=data.get("good_with_kids"),
            good_with_dogs=data.get("good_with_dogs"),
            good_with_cats=data.get("good_with_cats"),
            good_with_strangers=data.get("good_with_strangers"),
        )


@dataclass
class ServiceRegion:
    country: str
    region: str


@dataclass
class AdoptionFees:
    currency: str
    amount: float
    notes: str = ""


@dataclass
class Organization:
    """A rescue organization."""

    id: int
    slug: str
    name: str
    website_url: str = ""
    description: str = ""
    country: str = ""
    city: str = ""
    logo_url: str | None = None
    social_media: dict[str, str] = field(default_factory=dict)
    active: bool = True
    ships_to: list[str] = field(default_factory=list)
    service_regions: list[ServiceRegion] = field(default_factory=list)
    adoption_fees: AdoptionFees | None = None
    established_year: int | None = None
    total_dogs: int = 0
    new_this_week: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Organization":
        org_id = int(_require(data, "id", "organization"))
        fees = data.get("adoption_fees")
        regions = []
        for region in data.get("service_regions") or []:
            # The enhanced listing sends regions as plain strings
            if isinstance(region, dict):
                regions.append(
                    ServiceRegion(
                        country=region.get("country", ""),
                        region=region.get("region", ""),
                    )
                )
            else:
                regions.append(ServiceRegion(country=str(region), region=""))

        return cls(
            id=org_id,
            slug=data.get("slug") or "",
            name=_require(data, "name", "organization"),
            website_url=data.get("website_url") or "",
            description=data.get("description") or "",
            country=data.get("country") or "",
            city=data.get("city") or "",
            logo_url=data.get("logo_url"),
            social_media=data.get("social_media") or {},
            active=data.get("active", True),
            ships_to=_str_list(data.get("ships_to")),
            service_regions=regions,
            adoption_fees=(
                AdoptionFees(
                    currency=fees.get("currency", ""),
                    amount=fees.get("amount", 0),
                    notes=fees.get("notes") or "",
                )
                if isinstance(fees, dict)
                else None
            ),
            established_year=data.get("established_year"),
            total_dogs=data.get("total_dogs") or 0,
            new_this_week=data.get("new_this_week") or 0,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class Dog:
    """A rescue dog listing."""

    id: int
    slug: str
    name: str
    adoption_url: str = ""
    animal_type: str = "dog"
    breed: str | None = None
    standardized_breed: str | None = None
    breed_group: str | None = None
    primary_breed: str | None = None
    secondary_breed: str | None = None
    breed_type: str | None = None
    breed_slug: str | None = None
    age_text: str | None = None
    age_min_months: int | None = None
    age_max_months: int | None = None
    sex: str | None = None
    size: str | None = None
    standardized_size: str | None = None
    status: str = "available"
    primary_image_url: str | None = None
    organization_id: int | None = None
    external_id: str | None = None
    language: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    dog_profiler_data: DogProfilerData | None = None
    created_at: str | None = None
    updated_at: str | None = None
    last_scraped_at: str | None = None
    availability_confidence: str | None = None
    organization: Organization | None = None

    @property
    def display_breed(self) -> str | None:
        return self.standardized_breed or self.breed

    @property
    def display_size(self) -> str | None:
        return self.standardized_size or self.size

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Dog":
        dog_id = int(_require(data, "id", "dog"))
        profiler = data.get("dog_profiler_data")
        org = data.get("organization")
        return cls(
            id=dog_id,
            slug=_require(data, "slug", "dog"),
            name=_require(data, "name", "dog"),
            adoption_url=data.get("adoption_url") or "",
            animal_type=data.get("animal_type") or "dog",
            breed=data.get("breed"),
            standardized_breed=data.get("standardized_breed"),
            breed_group=data.get("breed_group"),
            primary_breed=data.get("primary_breed"),
            secondary_breed=data.get("secondary_breed"),
            breed_type=data.get("breed_type"),
            breed_slug=data.get("breed_slug"),
            age_text=data.get("age_text"),
            age_min_months=data.get("age_min_months"),
            age_max_months=data.get("age_max_months"),
            sex=data.get("sex"),
            size=data.get("size"),
            standardized_size=data.get("standardized_size"),
            status=data.get("status") or "available",
            primary_image_url=data.get("primary_image_url"),
            organization_id=data.get("organization_id"),
            external_id=data.get("external_id"),
            language=data.get("language"),
            properties=data.get("properties") or {},
            dog_profiler_data=(
                DogProfilerData.from_dict(profiler) if isinstance(profiler, dict) else None
            ),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            last_scraped_at=data.get("last_scraped_at"),
            availability_confidence=data.get("availability_confidence"),
            organization=Organization.from_dict(org) if isinstance(org, dict) else None,
        )


@dataclass
class BreedGroupCount:
    name: str
    count: int


@dataclass
class MetricValue:
    percentage: float
    label: str


@dataclass
class QualifyingBreed:
    """Aggregate statistics for a single breed."""

    primary_breed: str
    count: int
    breed_slug: str = ""
    breed_type: str | None = None
    breed_group: str | None = None
    average_age_months: float | None = None
    organization_count: int = 0
    organizations: list[str] = field(default_factory=list)
    age_distribution: dict[str, int] = field(default_factory=dict)
    size_distribution: dict[str, int] = field(default_factory=dict)
    sex_distribution: dict[str, int] = field(default_factory=dict)
    personality_traits: list[str] = field(default_factory=list)
    experience_distribution: dict[str, int] = field(default_factory=dict)
    personality_metrics: dict[str, MetricValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "QualifyingBreed":
        metrics = {
            name: MetricValue(
                percentage=value.get("percentage", 0),
                label=value.get("label", ""),
            )
            for name, value in (data.get("personality_metrics") or {}).items()
            if isinstance(value, dict)
        }
        return cls(
            primary_breed=_require(data, "primary_breed", "breed"),
            count=data.get("count") or 0,
            breed_slug=data.get("breed_slug") or "",
            breed_type=data.get("breed_type"),
            breed_group=data.get("breed_group"),
            average_age_months=data.get("average_age_months"),
            organization_count=data.get("organization_count") or 0,
            organizations=_str_list(data.get("organizations")),
            age_distribution=data.get("age_distribution") or {},
            size_distribution=data.get("size_distribution") or {},
            sex_distribution=data.get("sex_distribution") or {},
            personality_traits=_str_list(data.get("personality_traits")),
            experience_distribution=data.get("experience_distribution") or {},
            personality_metrics=metrics,
        )


@dataclass
class BreedStats:
    """Platform-wide breed statistics."""

    total_dogs: int = 0
    unique_breeds: int = 0
    purebred_count: int = 0
    crossbreed_count: int = 0
    breed_groups: list[BreedGroupCount] = field(default_factory=list)
    qualifying_breeds: list[QualifyingBreed] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "BreedStats":
        if not isinstance(data, dict):
            raise ValidationError("breed_stats", type(data).__name__, "Expected a JSON object")
        return cls(
            total_dogs=data.get("total_dogs") or 0,
            unique_breeds=data.get("unique_breeds") or 0,
            purebred_count=data.get("purebred_count") or 0,
            crossbreed_count=data.get("crossbreed_count") or 0,
            breed_groups=[
                BreedGroupCount(name=g.get("name", ""), count=g.get("count") or 0)
                for g in data.get("breed_groups") or []
            ],
            qualifying_breeds=[
                QualifyingBreed.from_dict(b) for b in data.get("qualifying_breeds") or []
            ],
        )


@dataclass
class CountryStats:
    country: str
    count: int


@dataclass
class OrganizationStats:
    """Per-organization entry of the platform statistics."""

    id: int
    name: str
    slug: str = ""
    dog_count: int = 0
    new_this_week: int = 0
    logo_url: str | None = None
    country: str = ""
    city: str = ""
    ships_to: list[str] = field(default_factory=list)
    service_regions: list[str] = field(default_factory=list)
    social_media: dict[str, str] = field(default_factory=dict)
    website_url: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "OrganizationStats":
        return cls(
            id=int(_require(data, "id", "organization_stats")),
            name=_require(data, "name", "organization_stats"),
            slug=data.get("slug") or "",
            dog_count=data.get("dog_count") or 0,
            new_this_week=data.get("new_this_week") or 0,
            logo_url=data.get("logo_url"),
            country=data.get("country") or "",
            city=data.get("city") or "",
            ships_to=_str_list(data.get("ships_to")),
            service_regions=_str_list(data.get("service_regions")),
            social_media=data.get("social_media") or {},
            website_url=data.get("website_url") or "",
            description=data.get("description") or "",
        )


@dataclass
class Statistics:
    """Platform-wide statistics."""

    total_dogs: int = 0
    total_organizations: int = 0
    countries: list[CountryStats] = field(default_factory=list)
    organizations: list[OrganizationStats] = field(default_factory=list)

    @property
    def new_this_week(self) -> int:
        return sum(org.new_this_week for org in self.organizations)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Statistics":
        if not isinstance(data, dict):
            raise ValidationError("statistics", type(data).__name__, "Expected a JSON object")
        return cls(
            total_dogs=data.get("total_dogs") or 0,
            total_organizations=data.get("total_organizations") or 0,
            countries=[
                CountryStats(country=c.get("country", ""), count=c.get("count") or 0)
                for c in data.get("countries") or []
            ],
            organizations=[
                OrganizationStats.from_dict(o) for o in data.get("organizations") or []
            ],
        )


@dataclass
class FilterOption:
    value: str
    label: str
    count: int

    @classmethod
    def from_dict(cls, data: dict) -> "FilterOption":
        value = str(data.get("value", ""))
        return cls(
            value=value,
            label=data.get("label") or value,
            count=data.get("count") or 0,
        )


@dataclass
class FilterCounts:
    """Available filter options with counts for a filter context."""

    size_options: list[FilterOption] = field(default_factory=list)
    age_options: list[FilterOption] = field(default_factory=list)
    sex_options: list[FilterOption] = field(default_factory=list)
    breed_options: list[FilterOption] = field(default_factory=list)
    organization_options: list[FilterOption] = field(default_factory=list)
    location_country_options: list[FilterOption] = field(default_factory=list)
    available_country_options: list[FilterOption] = field(default_factory=list)
    available_region_options: list[FilterOption] = field(default_factory=list)

    @property
    def countries_by_count(self) -> list[FilterOption]:
        """Available-to countries, most dogs first."""
        return sorted(self.available_country_options, key=lambda o: o.count, reverse=True)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "FilterCounts":
        if not isinstance(data, dict):
            raise ValidationError("filter_counts", type(data).__name__, "Expected a JSON object")

        def options(key: str) -> list[FilterOption]:
            return [FilterOption.from_dict(o) for o in data.get(key) or []]

        return cls(
            size_options=options("size_options"),
            age_options=options("age_options"),
            sex_options=options("sex_options"),
            breed_options=options("breed_options"),
            organization_options=options("organization_options"),
            location_country_options=options("location_country_options"),
            available_country_options=options("available_country_options"),
            available_region_options=options("available_region_options"),
        )


@dataclass(frozen=True)
class ImageContent:
    """A fetched image, base64-encoded."""

    data: str
    mime_type: str = "image/jpeg"


@dataclass
class FilterCriteria:
    """Caller-facing filter context for filter-count lookups."""

    breed: str | None = None
    size: str | None = None
    age_category: str | None = None
    sex: str | None = None
    adoptable_to_country: str | None = None

    def present(self) -> dict[str, str]:
        """Return only the fields that are set."""
        return {k: v for k, v in asdict(self).items() if v is not None}
