"""
Pytest fixtures and configuration for rescuedogs-mcp tests.

Provides a fake aiohttp session, a controllable clock, and sample upstream
payloads for unit testing.
"""

from typing import Any

import pytest

from rescuedogs_mcp.cache.memory import CacheLayer
from rescuedogs_mcp.client.api import RescueDogsClient
from rescuedogs_mcp.client.images import ImageClient
from rescuedogs_mcp.tools.service import RescueDogsService
from tests.fakes import API_BASE, IMAGE_BASE, FakeClock, FakeSession


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> CacheLayer:
    """Cache layer driven by the fake clock."""
    return CacheLayer(clock=clock)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def api_client(session: FakeSession) -> RescueDogsClient:
    """API client on the fake session with no pause before retries."""
    return RescueDogsClient(API_BASE, session=session, retry_delay=0)


@pytest.fixture
def image_client(session: FakeSession, cache: CacheLayer) -> ImageClient:
    return ImageClient(cache, IMAGE_BASE, session=session, retry_delay=0)


@pytest.fixture
def service(
    api_client: RescueDogsClient,
    image_client: ImageClient,
    cache: CacheLayer,
) -> RescueDogsService:
    return RescueDogsService(api_client, image_client, cache)


# =============================================================================
# Sample Payload Fixtures
# =============================================================================


@pytest.fixture
def sample_org_payload() -> dict[str, Any]:
    return {
        "id": 7,
        "slug": "happy-tails-rescue",
        "name": "Happy Tails Rescue",
        "website_url": "https://happytails.example",
        "description": "Rescuing street dogs in Romania.",
        "country": "RO",
        "city": "Bucharest",
        "active": True,
        "ships_to": ["UK", "IE", "DE"],
        "service_regions": [{"country": "RO", "region": "Ilfov"}],
        "total_dogs": 42,
        "new_this_week": 3,
    }


@pytest.fixture
def sample_dog_payload(sample_org_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": 101,
        "slug": "buddy-101",
        "name": "Buddy",
        "adoption_url": "https://happytails.example/adopt/buddy",
        "breed": "Labrador mix",
        "standardized_breed": "Labrador Retriever",
        "breed_group": "Sporting",
        "age_text": "2 years",
        "sex": "Male",
        "size": "large",
        "standardized_size": "Large",
        "status": "available",
        "primary_image_url": "https://images.rescuedogs.me/dogs/buddy.jpg",
        "organization_id": 7,
        "dog_profiler_data": {
            "description": "Buddy loves long walks.",
            "personality_traits": ["friendly", "playful"],
            "energy_level": "high",
        },
        "availability_confidence": "high",
        "organization": sample_org_payload,
    }


@pytest.fixture
def second_dog_payload(sample_org_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": 102,
        "slug": "luna-102",
        "name": "Luna",
        "adoption_url": "https://happytails.example/adopt/luna",
        "breed": "Mixed",
        "age_text": "6 months",
        "sex": "Female",
        "standardized_size": "Small",
        "primary_image_url": None,
        "organization": sample_org_payload,
    }


@pytest.fixture
def sample_enhanced_payload() -> dict[str, Any]:
    return {
        "id": 101,
        "tagline": "Your next hiking buddy",
        "bio": "Buddy is a gentle giant who adores people.",
        "personality_traits": ["gentle", "loyal"],
        "looking_for": "An active family with a garden.",
        "energy_level": "high",
        "home_type": "house_preferred",
        "experience_level": "some_experience",
        "good_with_kids": True,
    }


@pytest.fixture
def sample_breed_stats_payload() -> dict[str, Any]:
    return {
        "total_dogs": 1500,
        "unique_breeds": 120,
        "purebred_count": 400,
        "crossbreed_count": 1100,
        "breed_groups": [
            {"name": "Herding", "count": 200},
            {"name": "Sporting", "count": 150},
        ],
        "qualifying_breeds": [
            {
                "primary_breed": "German Shepherd",
                "breed_slug": "german-shepherd",
                "breed_group": "Herding",
                "count": 45,
                "organization_count": 6,
                "personality_traits": ["loyal", "smart", "alert", "brave"],
            },
            {
                "primary_breed": "Border Collie",
                "breed_slug": "border-collie",
                "breed_group": "Herding",
                "count": 12,
                "organization_count": 3,
            },
            {
                "primary_breed": "Labrador Retriever",
                "breed_slug": "labrador-retriever",
                "breed_group": "Sporting",
                "count": 30,
            },
        ],
    }


@pytest.fixture
def sample_statistics_payload() -> dict[str, Any]:
    return {
        "total_dogs": 2500,
        "total_organizations": 2,
        "countries": [
            {"country": "RO", "count": 900},
            {"country": "ES", "count": 600},
        ],
        "organizations": [
            {"id": 7, "name": "Happy Tails Rescue", "dog_count": 42, "new_this_week": 3, "country": "RO"},
            {"id": 8, "name": "Sol Dogs", "dog_count": 30, "new_this_week": 2, "country": "ES"},
        ],
    }


@pytest.fixture
def sample_filter_counts_payload() -> dict[str, Any]:
    return {
        "size_options": [{"value": "Small", "label": "Small", "count": 40}],
        "age_options": [{"value": "Puppy", "label": "Puppy", "count": 12}],
        "sex_options": [{"value": "Female", "label": "Female", "count": 25}],
        "breed_options": [{"value": "Mixed", "label": "Mixed", "count": 60}],
        "available_country_options": [
            {"value": "DE", "label": "Germany", "count": 10},
            {"value": "UK", "label": "United Kingdom", "count": 80},
            {"value": "IE", "label": "Ireland", "count": 30},
        ],
    }
