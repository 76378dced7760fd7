"""
Tests for vocabulary mappings and input validation.
"""

import pytest

from rescuedogs_mcp.core.exceptions import ValidationError
from rescuedogs_mcp.core.mappings import (
    ENERGY_LEVEL_MAP,
    EXPERIENCE_MAP,
    HOME_TYPE_MAP,
    map_age_category,
    map_sex,
    map_value,
    normalize_country_for_api,
    normalize_country_for_guide,
)
from rescuedogs_mcp.core.validation import (
    encode_path_segment,
    validate_country_code,
    validate_response_size,
    validate_slug,
)


class TestCountryNormalization:
    """Tests for the two country normalizers."""

    @pytest.mark.parametrize(
        "code,expected",
        [("gb", "UK"), ("GB", "UK"), ("uk", "UK"), ("FR", "FR"), ("ie", "IE")],
    )
    def test_for_api(self, code, expected):
        """Test that GB becomes UK for the API and others are upper-cased."""
        assert normalize_country_for_api(code) == expected

    def test_for_api_absent(self):
        """Test that absent codes stay absent."""
        assert normalize_country_for_api(None) is None
        assert normalize_country_for_api("") is None

    @pytest.mark.parametrize(
        "code,expected",
        [("UK", "GB"), ("uk", "GB"), ("GB", "GB"), ("de", "DE")],
    )
    def test_for_guide(self, code, expected):
        """Test that UK becomes GB for guide lookups."""
        assert normalize_country_for_guide(code) == expected

    def test_directions_differ(self):
        """Test that the two normalizers are not interchangeable."""
        assert normalize_country_for_api("GB") != normalize_country_for_guide("GB")


class TestEnumMappings:
    """Tests for the lookup tables."""

    def test_age_category(self):
        """Test that age categories are capitalized."""
        assert map_age_category("puppy") == "Puppy"
        assert map_age_category("senior") == "Senior"
        assert map_age_category(None) is None

    def test_sex(self):
        """Test that sexes are capitalized."""
        assert map_sex("female") == "Female"

    def test_living_situation(self):
        """Test living situation to home type."""
        assert HOME_TYPE_MAP["apartment"] == "apartment_ok"
        assert HOME_TYPE_MAP["house_small_garden"] == "house_preferred"
        assert HOME_TYPE_MAP["house_large_garden"] == "house_preferred"
        assert HOME_TYPE_MAP["rural"] == "house_required"

    def test_activity_level(self):
        """Test activity level to energy level."""
        assert ENERGY_LEVEL_MAP["sedentary"] == "low"
        assert ENERGY_LEVEL_MAP["very_active"] == "very_high"

    def test_experience(self):
        """Test ownership experience to experience level."""
        assert EXPERIENCE_MAP["first_time"] == "first_time_ok"
        assert EXPERIENCE_MAP["experienced"] == "experienced_only"

    def test_unmapped_value_rejected(self):
        """Test that an unknown value raises instead of defaulting."""
        with pytest.raises(ValidationError) as exc_info:
            map_value(HOME_TYPE_MAP, "boat", "living_situation")

        assert exc_info.value.field == "living_situation"
        assert "apartment" in str(exc_info.value)

    def test_unmapped_age_rejected(self):
        """Test that an unknown age category raises."""
        with pytest.raises(ValidationError):
            map_age_category("ancient")


class TestValidateSlug:
    """Tests for validate_slug."""

    def test_valid(self):
        """Test that valid slugs are returned stripped."""
        assert validate_slug("  buddy-12345 ") == "buddy-12345"
        assert validate_slug("rex_2") == "rex_2"

    @pytest.mark.parametrize("slug", ["", "   ", "../etc", "buddy/1", "a b", "-lead"])
    def test_invalid(self, slug):
        """Test that empty and malformed slugs are rejected."""
        with pytest.raises(ValidationError):
            validate_slug(slug)

    def test_too_long(self):
        """Test the slug length limit."""
        with pytest.raises(ValidationError, match="character limit"):
            validate_slug("a" * 201)


class TestValidateCountryCode:
    """Tests for validate_country_code."""

    def test_valid(self):
        """Test that two-letter codes pass with case preserved."""
        assert validate_country_code("gb") == "gb"
        assert validate_country_code(" IE ") == "IE"
        assert validate_country_code(None) is None

    @pytest.mark.parametrize("code", ["", "G", "GBR", "1E", "United Kingdom"])
    def test_invalid(self, code):
        """Test that anything but two letters is rejected."""
        with pytest.raises(ValidationError):
            validate_country_code(code)


class TestMiscValidation:
    """Tests for path encoding and response size checks."""

    def test_encode_path_segment(self):
        """Test that separators are encoded."""
        assert encode_path_segment("a/b c") == "a%2Fb%20c"

    def test_response_size(self):
        """Test that oversized responses are rejected."""
        validate_response_size(None)
        validate_response_size(1024, max_size=2048)
        with pytest.raises(ValidationError):
            validate_response_size(4096, max_size=2048)
