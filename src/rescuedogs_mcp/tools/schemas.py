"""
Input schemas for the MCP tools.

Each tool validates its arguments into one of these models before the
service touches the network. Unknown fields are rejected.

Every parameter's type, bounds and description is declared once as an
``Annotated`` alias below, shared by these models and the tool signatures
in ``tools.server``.
"""

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from rescuedogs_mcp.core.models import FilterCriteria, ImagePreset, ResponseFormat

Size = Literal["Tiny", "Small", "Medium", "Large", "XLarge"]
AgeCategory = Literal["puppy", "young", "adult", "senior"]
Sex = Literal["male", "female"]
EnergyLevel = Literal["low", "medium", "high", "very_high"]
ExperienceLevel = Literal["first_time_ok", "some_experience", "experienced_only"]
HomeType = Literal["apartment_ok", "house_preferred", "house_required"]
LivingSituation = Literal["apartment", "house_small_garden", "house_large_garden", "rural"]
ActivityLevel = Literal["sedentary", "moderate", "active", "very_active"]
Experience = Literal["first_time", "some", "experienced"]
GuideTopic = Literal["overview", "transport", "fees", "requirements", "timeline"]


# =============================================================================
# Shared parameters
# =============================================================================

ResponseFormatParam = Annotated[
    ResponseFormat,
    Field(description="Response format: 'markdown' for human-readable or 'json' for structured data"),
]
ImagePresetParam = Annotated[
    ImagePreset,
    Field(description="Image size preset: 'thumbnail' (200x200) or 'medium' (400x400)"),
]
IncludeImagesParam = Annotated[
    bool, Field(description="Include dog photos in response (opt-in, increases response size)")
]
AdoptableToCountryParam = Annotated[
    Optional[str],
    Field(description="ISO country code where dog can be adopted to (e.g., 'GB', 'IE', 'FR')"),
]
BreedGroupParam = Annotated[
    Optional[str],
    Field(description="Filter by FCI breed group (e.g., 'Herding', 'Sporting', 'Hound')"),
]

# Search
QueryParam = Annotated[
    Optional[str], Field(description="Free-text search in dog names and descriptions")
]
BreedParam = Annotated[
    Optional[str], Field(description="Filter by breed name (e.g., 'Golden Retriever', 'Mixed')")
]
SizeParam = Annotated[Optional[Size], Field(description="Filter by standardized size")]
AgeCategoryParam = Annotated[
    Optional[AgeCategory],
    Field(
        description=(
            "Filter by age category: puppy (0-12 months), young (1-3 years), "
            "adult (3-8 years), senior (8+ years)"
        )
    ),
]
SexParam = Annotated[Optional[Sex], Field(description="Filter by sex")]
EnergyLevelParam = Annotated[
    Optional[EnergyLevel], Field(description="Filter by energy level from LLM profiler data")
]
ExperienceLevelParam = Annotated[
    Optional[ExperienceLevel], Field(description="Filter by required owner experience level")
]
HomeTypeParam = Annotated[Optional[HomeType], Field(description="Filter by required home type")]
OrganizationIdParam = Annotated[
    Optional[int], Field(description="Filter by specific rescue organization ID")
]
GoodWithKidsParam = Annotated[Optional[bool], Field(description="Only dogs good with children")]
GoodWithDogsParam = Annotated[Optional[bool], Field(description="Only dogs good with other dogs")]
GoodWithCatsParam = Annotated[Optional[bool], Field(description="Only dogs good with cats")]
SearchLimitParam = Annotated[
    int, Field(ge=1, le=50, description="Number of results to return (1-50)")
]
OffsetParam = Annotated[int, Field(ge=0, description="Number of results to skip for pagination")]

# Dog details
SlugParam = Annotated[str, Field(description="Dog's URL-friendly slug (e.g., 'buddy-12345')")]
IncludeImageParam = Annotated[bool, Field(description="Include dog photo in response")]

# Breeds
MinCountParam = Annotated[
    int, Field(ge=1, description="Minimum number of dogs available for a breed to be included")
]
BreedLimitParam = Annotated[int, Field(ge=1, le=100, description="Number of breeds to return")]

# Organizations
OrgCountryParam = Annotated[
    Optional[str], Field(description="Filter by ISO country code (e.g., 'GB', 'ES', 'RO')")
]
ActiveOnlyParam = Annotated[bool, Field(description="Only return active organizations")]
OrgLimitParam = Annotated[
    int, Field(ge=1, le=50, description="Number of organizations to return")
]

# Preference matching
LivingSituationParam = Annotated[
    LivingSituation, Field(description="Your living situation for home type matching")
]
ActivityLevelParam = Annotated[
    ActivityLevel, Field(description="Your activity level for energy matching")
]
ExperienceParam = Annotated[Experience, Field(description="Your dog ownership experience level")]
HasChildrenParam = Annotated[Optional[bool], Field(description="Whether you have children at home")]
HasOtherDogsParam = Annotated[
    Optional[bool], Field(description="Whether you have other dogs at home")
]
HasCatsParam = Annotated[Optional[bool], Field(description="Whether you have cats at home")]
MatchLimitParam = Annotated[
    int, Field(ge=1, le=20, description="Number of matching dogs to return")
]

# Adoption guide
GuideTopicParam = Annotated[
    GuideTopic, Field(description="Specific adoption topic to get information about")
]
GuideCountryParam = Annotated[
    Optional[str], Field(description="ISO country code for country-specific adoption info")
]


# =============================================================================
# Tool inputs
# =============================================================================


class ToolInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class SearchDogsInput(ToolInput):
    query: QueryParam = None
    breed: BreedParam = None
    breed_group: BreedGroupParam = None
    size: SizeParam = None
    age_category: AgeCategoryParam = None
    sex: SexParam = None
    energy_level: EnergyLevelParam = None
    experience_level: ExperienceLevelParam = None
    home_type: HomeTypeParam = None
    adoptable_to_country: AdoptableToCountryParam = None
    organization_id: OrganizationIdParam = None
    good_with_kids: GoodWithKidsParam = None
    good_with_dogs: GoodWithDogsParam = None
    good_with_cats: GoodWithCatsParam = None
    limit: SearchLimitParam = 10
    offset: OffsetParam = 0
    include_images: IncludeImagesParam = False
    image_preset: ImagePresetParam = ImagePreset.THUMBNAIL
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class GetDogDetailsInput(ToolInput):
    slug: SlugParam
    include_image: IncludeImageParam = True
    image_preset: ImagePresetParam = ImagePreset.MEDIUM
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class ListBreedsInput(ToolInput):
    breed_group: BreedGroupParam = None
    min_count: MinCountParam = 1
    limit: BreedLimitParam = 20
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class GetStatisticsInput(ToolInput):
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class CurrentFilters(ToolInput):
    breed: Optional[str] = None
    size: Optional[Size] = None
    age_category: Optional[AgeCategory] = None
    sex: Optional[Sex] = None
    adoptable_to_country: Optional[str] = None

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(**self.model_dump())


CurrentFiltersParam = Annotated[
    Optional[CurrentFilters],
    Field(description="Current filter context to show remaining options"),
]


class GetFilterCountsInput(ToolInput):
    current_filters: CurrentFiltersParam = None
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class ListOrganizationsInput(ToolInput):
    country: OrgCountryParam = None
    active_only: ActiveOnlyParam = True
    limit: OrgLimitParam = 20
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class MatchPreferencesInput(ToolInput):
    living_situation: LivingSituationParam
    activity_level: ActivityLevelParam
    experience: ExperienceParam
    has_children: HasChildrenParam = None
    has_other_dogs: HasOtherDogsParam = None
    has_cats: HasCatsParam = None
    adoptable_to_country: AdoptableToCountryParam = None
    limit: MatchLimitParam = 5
    include_images: IncludeImagesParam = False
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN


class GetAdoptionGuideInput(ToolInput):
    topic: GuideTopicParam = "overview"
    country: GuideCountryParam = None
