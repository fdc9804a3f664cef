"""Macro Calculations - Pure functions for nutrition math.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Iterable

from .models import CalorieProgress, FoodItem, GoalTargets, NutrientTotals


def calculate_totals(entries: Iterable[FoodItem]) -> NutrientTotals:
    """Calculate total nutrients from a list of logged foods.

    Args:
        entries: Entries for the current day

    Returns:
        NutrientTotals, all zero for an empty log
    """
    entries = list(entries)
    return NutrientTotals(
        calories_kcal=sum(e.calories_kcal for e in entries),
        protein_g=sum(e.protein_g for e in entries),
        carbs_g=sum(e.carbs_g for e in entries),
        fat_g=sum(e.fat_g for e in entries),
    )


def calculate_remaining_calories(totals: NutrientTotals, goals: GoalTargets) -> float:
    """Calories left for the day, floored at zero."""
    return max(0, goals.calories_kcal - totals.calories_kcal)


def calculate_progress(totals: NutrientTotals, goals: GoalTargets) -> CalorieProgress:
    """Calculate calorie progress against the goal.

    The percentage is clamped to 100 for display; ``exceeded`` and
    ``raw_percent`` keep the over-goal information.

    Args:
        totals: Current day totals
        goals: Daily targets

    Returns:
        CalorieProgress
    """
    if goals.calories_kcal <= 0:
        return CalorieProgress(
            percent=0,
            raw_percent=0,
            exceeded=totals.calories_kcal > 0,
        )

    raw = totals.calories_kcal / goals.calories_kcal * 100
    return CalorieProgress(
        percent=min(raw, 100),
        raw_percent=raw,
        exceeded=totals.calories_kcal > goals.calories_kcal,
    )


def calculate_calories_from_macros(protein: float, carbs: float, fat: float) -> int:
    """Calculate calories from macronutrients.

    Uses standard conversion: 4 cal/g protein, 4 cal/g carbs, 9 cal/g fat.

    Args:
        protein: Grams of protein
        carbs: Grams of carbohydrates
        fat: Grams of fat

    Returns:
        Estimated calories (rounded to nearest integer)
    """
    return round(protein * 4 + carbs * 4 + fat * 9)
