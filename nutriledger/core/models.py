"""Core Data Models - Pydantic models for type safety.

All models are immutable value objects with no behavior beyond validation.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
import uuid


class Sex(str, Enum):
    """Sex values supported by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class WeightClass(str, Enum):
    """How heavy a food sits, as shown on the scan result badge."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class EntryOrder(str, Enum):
    """Ordering for log projections."""

    CHRONOLOGICAL = "chronological"
    MOST_RECENT_FIRST = "most_recent_first"


class UserProfile(BaseModel):
    """Body metrics collected during onboarding."""

    model_config = ConfigDict(frozen=True)

    weight_kg: float = Field(gt=0, description="Body weight in kilograms")
    height_cm: float = Field(gt=0, description="Height in centimetres")
    age_years: int = Field(gt=0, description="Age in whole years")
    sex: Sex


class FoodItem(BaseModel):
    """A food as provided by the catalog or a detector."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Identifier assigned by the food source")
    name: str = Field(min_length=1, description="Name of the food")
    calories_kcal: float = Field(ge=0, description="Energy in kcal")
    protein_g: float = Field(ge=0, description="Protein in grams")
    carbs_g: float = Field(ge=0, description="Carbohydrates in grams")
    fat_g: float = Field(ge=0, description="Fat in grams")
    weight_class: WeightClass = WeightClass.MEDIUM
    digestion_estimate: str = Field(default="", description="e.g. '2 hours'")


class LogEntry(FoodItem):
    """A food item copied into the daily log at the moment it was eaten."""

    entry_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    logged_at: str = Field(description="Local time the entry was logged")


class GoalTargets(BaseModel):
    """Daily targets derived from a user profile."""

    model_config = ConfigDict(frozen=True)

    calories_kcal: int = Field(ge=0)
    protein_g: int = Field(ge=0)
    carbs_g: int = Field(ge=0)
    fat_g: int = Field(ge=0)


# Targets reported before the user has completed onboarding.
DEFAULT_GOALS = GoalTargets(calories_kcal=2000, protein_g=150, carbs_g=250, fat_g=70)


class NutrientTotals(BaseModel):
    """Summed nutrients of the current day's entries."""

    calories_kcal: float = 0
    protein_g: float = 0
    carbs_g: float = 0
    fat_g: float = 0


class CalorieProgress(BaseModel):
    """Calorie progress against the daily goal."""

    percent: float = Field(ge=0, le=100, description="Clamped to 0..100")
    raw_percent: float = Field(ge=0, description="Unclamped ratio of intake to goal")
    exceeded: bool = Field(description="True when intake is above the goal")


class LedgerSnapshot(BaseModel):
    """Full persisted state of a ledger."""

    profile: Optional[UserProfile] = None
    day_key: str = Field(description="Local calendar day, YYYY-MM-DD")
    entries: list[LogEntry] = Field(default_factory=list)


class DashboardView(BaseModel):
    """Read model rendered by the dashboard."""

    remaining_calories: float
    progress_percent: float = Field(ge=0, le=100)
    exceeded_goal: bool
    totals: NutrientTotals
    goals: GoalTargets
    recent_entries: list[LogEntry] = Field(description="Most recent first")
