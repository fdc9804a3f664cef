"""Goal Engine - Pure functions deriving daily targets from a profile.

All functions are pure: same input always produces same output, no side effects.
"""

import math
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import InvalidProfile
from .models import GoalTargets, Sex, UserProfile


# Mifflin-St Jeor sex offsets
MALE_OFFSET = 5
FEMALE_OFFSET = -161

# Only sedentary activity is supported; not user-configurable.
SEDENTARY_ACTIVITY_FACTOR = 1.2

# Share of daily calories per macro
PROTEIN_SHARE = 0.30
CARB_SHARE = 0.40
FAT_SHARE = 0.30

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARB = 4
KCAL_PER_GRAM_FAT = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (1978.5 -> 1979)."""
    return math.floor(value + 0.5)


def parse_profile(data: Mapping[str, Any]) -> UserProfile:
    """Build a UserProfile from raw onboarding input.

    Args:
        data: Mapping with weight_kg, height_cm, age_years and sex

    Returns:
        Validated UserProfile

    Raises:
        InvalidProfile: If any field is missing, non-positive or unsupported
    """
    try:
        return UserProfile.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidProfile(str(e)) from e


def validate_profile(profile: UserProfile) -> None:
    """Check a profile's fields even if it bypassed model validation.

    Raises:
        InvalidProfile: If any metric is non-positive or sex is unsupported
    """
    for field in ("weight_kg", "height_cm", "age_years"):
        value = getattr(profile, field, None)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise InvalidProfile(f"{field} must be a positive number, got {value!r}")
    if profile.sex not in (Sex.MALE, Sex.FEMALE):
        raise InvalidProfile(f"Unsupported sex: {profile.sex!r}")


def calculate_bmr(profile: UserProfile) -> float:
    """Basal metabolic rate using the Mifflin-St Jeor equation.

    Args:
        profile: Validated user profile

    Returns:
        BMR in kcal/day
    """
    offset = MALE_OFFSET if profile.sex == Sex.MALE else FEMALE_OFFSET
    return 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age_years + offset


def calculate_daily_calories(bmr: float) -> int:
    """Total daily energy expenditure for a sedentary user."""
    return round_half_up(bmr * SEDENTARY_ACTIVITY_FACTOR)


def derive_goals(profile: UserProfile) -> GoalTargets:
    """Derive calorie and macro targets from a profile.

    Macro split is 30% protein / 40% carbs / 30% fat of daily calories,
    converted at 4 kcal/g for protein and carbs and 9 kcal/g for fat.

    Args:
        profile: The user's profile

    Returns:
        GoalTargets for one day

    Raises:
        InvalidProfile: If the profile is malformed
    """
    validate_profile(profile)

    daily = calculate_daily_calories(calculate_bmr(profile))
    # A very small, very old profile can push BMR below zero
    daily = max(daily, 0)

    return GoalTargets(
        calories_kcal=daily,
        protein_g=round_half_up(daily * PROTEIN_SHARE / KCAL_PER_GRAM_PROTEIN),
        carbs_g=round_half_up(daily * CARB_SHARE / KCAL_PER_GRAM_CARB),
        fat_g=round_half_up(daily * FAT_SHARE / KCAL_PER_GRAM_FAT),
    )
