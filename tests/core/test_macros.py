"""Unit tests for macro calculations - pure functions, no mocks needed."""

from nutriledger.core.models import FoodItem, GoalTargets, NutrientTotals
from nutriledger.core.macros import (
    calculate_totals,
    calculate_remaining_calories,
    calculate_progress,
    calculate_calories_from_macros,
)


GOALS = GoalTargets(calories_kcal=2000, protein_g=150, carbs_g=200, fat_g=67)


def food(name: str, calories: float, protein: float = 0, carbs: float = 0, fat: float = 0) -> FoodItem:
    return FoodItem(
        id=name.lower(),
        name=name,
        calories_kcal=calories,
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fat,
    )


class TestCalculateTotals:
    """Tests for calculate_totals."""

    def test_empty_entries(self):
        """Empty list returns zeros."""
        assert calculate_totals([]) == NutrientTotals(
            calories_kcal=0, protein_g=0, carbs_g=0, fat_g=0
        )

    def test_single_entry(self):
        """Single entry returns its values."""
        totals = calculate_totals([food("Coffee", 65, 4.0, 6.5, 2.5)])
        assert totals == NutrientTotals(calories_kcal=65, protein_g=4.0, carbs_g=6.5, fat_g=2.5)

    def test_multiple_entries(self):
        """Multiple entries are summed correctly."""
        entries = [
            food("Coffee", 65, 4, 6.5, 2.5),
            food("Eggs", 140, 12, 0, 10),
            food("Bread", 120, 3, 20, 3),
        ]
        totals = calculate_totals(entries)
        assert totals.calories_kcal == 325
        assert totals.protein_g == 19.0
        assert totals.carbs_g == 26.5
        assert totals.fat_g == 15.5

    def test_accepts_generators(self):
        """Any iterable of foods can be totalled."""
        totals = calculate_totals(food(n, 100) for n in ("A", "B"))
        assert totals.calories_kcal == 200


class TestCalculateRemainingCalories:
    """Tests for calculate_remaining_calories."""

    def test_partial_day(self):
        """Remaining is goal minus intake."""
        assert calculate_remaining_calories(NutrientTotals(calories_kcal=500), GOALS) == 1500

    def test_over_goal_floors_at_zero(self):
        """Going over goal never reports negative remaining."""
        assert calculate_remaining_calories(NutrientTotals(calories_kcal=2500), GOALS) == 0


class TestCalculateProgress:
    """Tests for calculate_progress."""

    def test_half_way(self):
        """1000 of 2000 is 50%."""
        progress = calculate_progress(NutrientTotals(calories_kcal=1000), GOALS)
        assert progress.percent == 50
        assert progress.exceeded is False

    def test_over_goal_clamped(self):
        """2500 of 2000 shows 100% and flags the overage."""
        progress = calculate_progress(NutrientTotals(calories_kcal=2500), GOALS)
        assert progress.percent == 100
        assert progress.raw_percent == 125
        assert progress.exceeded is True

    def test_exactly_at_goal_not_exceeded(self):
        """Hitting the goal exactly is not an overage."""
        progress = calculate_progress(NutrientTotals(calories_kcal=2000), GOALS)
        assert progress.percent == 100
        assert progress.exceeded is False

    def test_zero_goal(self):
        """A zero goal reports zero progress instead of dividing by zero."""
        goals = GoalTargets(calories_kcal=0, protein_g=0, carbs_g=0, fat_g=0)
        progress = calculate_progress(NutrientTotals(calories_kcal=10), goals)
        assert progress.percent == 0
        assert progress.exceeded is True


class TestCalculateCaloriesFromMacros:
    """Tests for calculate_calories_from_macros."""

    def test_protein_only(self):
        """4 cal per gram of protein."""
        assert calculate_calories_from_macros(protein=25, carbs=0, fat=0) == 100

    def test_fat_only(self):
        """9 cal per gram of fat."""
        assert calculate_calories_from_macros(protein=0, carbs=0, fat=10) == 90

    def test_mixed_macros(self):
        """Mixed macros calculate correctly."""
        # 10g protein (40) + 20g carbs (80) + 5g fat (45) = 165
        assert calculate_calories_from_macros(protein=10, carbs=20, fat=5) == 165
