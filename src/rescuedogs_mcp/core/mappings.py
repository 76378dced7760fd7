"""
Vocabulary translation between tool inputs and the upstream API.

Tool callers use lowercase enums and ISO country codes; the backend expects
capitalized enums, its own preference vocabulary, and "UK" for the United
Kingdom. Every table maps each accepted input to exactly one backend value.
Unmapped values are rejected rather than defaulted.
"""

from rescuedogs_mcp.core.exceptions import ValidationError

AGE_CATEGORY_MAP: dict[str, str] = {
    "puppy": "Puppy",
    "young": "Young",
    "adult": "Adult",
    "senior": "Senior",
}

SEX_MAP: dict[str, str] = {
    "male": "Male",
    "female": "Female",
}

# Living situation -> home_type
HOME_TYPE_MAP: dict[str, str] = {
    "apartment": "apartment_ok",
    "house_small_garden": "house_preferred",
    "house_large_garden": "house_preferred",
    "rural": "house_required",
}

# Activity level -> energy_level
ENERGY_LEVEL_MAP: dict[str, str] = {
    "sedentary": "low",
    "moderate": "medium",
    "active": "high",
    "very_active": "very_high",
}

# Ownership experience -> experience_level
EXPERIENCE_MAP: dict[str, str] = {
    "first_time": "first_time_ok",
    "some": "some_experience",
    "experienced": "experienced_only",
}


def map_value(table: dict[str, str], value: str | None, field: str) -> str | None:
    """Translate a caller value through a lookup table.

    Args:
        table: One of the mapping tables above.
        value: Caller-supplied value, or None when the filter is unset.
        field: Field name used in the error message.

    Returns:
        The backend value, or None if ``value`` is None.

    Raises:
        ValidationError: If ``value`` has no mapping.
    """
    if value is None:
        return None
    try:
        return table[value]
    except KeyError:
        allowed = ", ".join(sorted(table))
        raise ValidationError(field, value, f"Expected one of: {allowed}") from None


def map_age_category(value: str | None) -> str | None:
    return map_value(AGE_CATEGORY_MAP, value, "age_category")


def map_sex(value: str | None) -> str | None:
    return map_value(SEX_MAP, value, "sex")


def normalize_country_for_api(code: str | None) -> str | None:
    """Normalize a country code for outgoing API requests.

    The backend stores the United Kingdom as "UK", so the ISO code "GB" is
    rewritten. Matching is case-insensitive; other codes are upper-cased.
    """
    if not code:
        return None
    upper = code.strip().upper()
    return "UK" if upper == "GB" else upper


def normalize_country_for_guide(code: str | None) -> str | None:
    """Normalize a country code for the adoption guide lookup.

    The guide table is keyed by ISO codes, so "UK" becomes "GB". This is the
    reverse direction of ``normalize_country_for_api`` and must stay separate.
    """
    if not code:
        return None
    upper = code.strip().upper()
    return "GB" if upper == "UK" else upper
