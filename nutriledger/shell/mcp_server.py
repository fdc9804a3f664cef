"""MCP Server - Tool definitions for Claude integration.

Defines all MCP tools that Claude can invoke to track the day's nutrition.
Tools are bound to one explicitly constructed ledger.
"""

import logging

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.catalog import DEFAULT_CATALOG, FoodCatalog, FoodDetector, RandomCatalogDetector
from ..core.dashboard import DEFAULT_PREVIEW_COUNT
from ..core.errors import InvalidFoodItem, InvalidProfile, NotFound, PersistenceError
from ..core.macros import calculate_calories_from_macros
from ..core.models import FoodItem, LogEntry, WeightClass
from .ledger import NutritionLedger


logger = logging.getLogger(__name__)

INSTRUCTIONS = """NutriLedger - Daily nutrition tracker.

Use these tools to track what the user eats today against goals derived from
their body metrics.

On first use, call setup_profile with weight, height, age and sex.
To log a food, use search_food or scan_food, then log_catalog_food with the id.
Foods not in the catalog can be logged directly with log_food.
After logging, always show the updated dashboard from get_today."""

UNSAVED_WARNING = "Latest changes are not saved yet. Storage is unavailable; please try again later."

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=["localhost:*", "127.0.0.1:*", "testserver"],
)


def _entry_dict(entry: LogEntry) -> dict:
    return {
        "entry_id": entry.entry_id,
        "food_id": entry.id,
        "name": entry.name,
        "logged_at": entry.logged_at,
        "calories_kcal": entry.calories_kcal,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fat_g": entry.fat_g,
    }


def _food_dict(food: FoodItem) -> dict:
    return {
        "id": food.id,
        "name": food.name,
        "calories_kcal": food.calories_kcal,
        "protein_g": food.protein_g,
        "carbs_g": food.carbs_g,
        "fat_g": food.fat_g,
        "weight_class": food.weight_class.value,
        "digestion_estimate": food.digestion_estimate,
    }


class LedgerTools:
    """Tool implementations over a ledger, catalog and detector."""

    def __init__(
        self,
        ledger: NutritionLedger,
        catalog: FoodCatalog = DEFAULT_CATALOG,
        detector: FoodDetector | None = None,
        preview_count: int = DEFAULT_PREVIEW_COUNT,
    ) -> None:
        self.ledger = ledger
        self.catalog = catalog
        self.detector = detector or RandomCatalogDetector(catalog)
        self.preview_count = preview_count

    # ==================== Profile Tools ====================

    def setup_profile(self, weight_kg: float, height_cm: float, age_years: int, sex: str) -> dict:
        """Save the user's body metrics and derive daily goals.

        Call this on first use or whenever any metric changes.

        Args:
            weight_kg: Body weight in kilograms (e.g., 70)
            height_cm: Height in centimetres (e.g., 175)
            age_years: Age in years (e.g., 30)
            sex: "male" or "female"

        Returns:
            The derived daily goals
        """
        try:
            goals = self.ledger.set_profile({
                "weight_kg": weight_kg,
                "height_cm": height_cm,
                "age_years": age_years,
                "sex": sex.lower(),
            })
        except InvalidProfile:
            return {"error": "Invalid profile. Use positive numbers and sex 'male' or 'female'."}
        except PersistenceError:
            return {
                "goals": self.ledger.goals.model_dump(),
                "warning": "Profile updated but could not be saved. Please try again.",
            }
        return {"goals": goals.model_dump()}

    def get_profile(self) -> dict:
        """Retrieve the user's profile and current goals.

        Returns:
            Dictionary with profile and goals, or error message if not set up
        """
        profile = self.ledger.profile
        if profile is None:
            return {"error": "No profile found. Please use setup_profile first."}
        return {
            "profile": profile.model_dump(mode="json"),
            "goals": self.ledger.goals.model_dump(),
        }

    # ==================== Food Lookup Tools ====================

    def search_food(self, query: str) -> dict:
        """Search the food catalog by name.

        Args:
            query: Part of a food name (e.g., "rice")

        Returns:
            Matching foods, or an error if nothing matches
        """
        results = self.catalog.search(query)
        if not results:
            return {"error": "Food not found. Try 'Apple', 'Rice', 'Chicken'..."}
        return {"results": [_food_dict(f) for f in results]}

    def scan_food(self, image_hint: str | None = None) -> dict:
        """Recognise a food from a photo.

        The result is not logged; confirm it with log_catalog_food.

        Args:
            image_hint: Photo reference or description passed to the detector

        Returns:
            The detected food
        """
        try:
            food = self.detector.detect(image_hint)
        except NotFound:
            return {"error": "Could not recognise a food. Try search_food instead."}
        logger.info("Detected %s", food.name)
        return {"detected": _food_dict(food)}

    # ==================== Logging Tools ====================

    def log_catalog_food(self, food_id: str, logged_at: str | None = None) -> dict:
        """Add a catalog food to today's log.

        Args:
            food_id: The id returned by search_food or scan_food
            logged_at: Optional local time label (e.g., "08:30")

        Returns:
            The created entry and updated dashboard
        """
        try:
            food = self.catalog.get(food_id)
        except NotFound:
            return {"error": f"No food with id {food_id}. Use search_food first."}
        return self._log(food, logged_at)

    def log_food(
        self,
        name: str,
        protein_g: float,
        carbs_g: float,
        fat_g: float,
        calories_kcal: float | None = None,
        weight_class: str = "medium",
        digestion_estimate: str = "",
        logged_at: str | None = None,
    ) -> dict:
        """Add a food that is not in the catalog to today's log.

        Args:
            name: Name of the food
            protein_g: Protein in grams
            carbs_g: Carbohydrates in grams
            fat_g: Fat in grams
            calories_kcal: Calories; estimated from macros when omitted
            weight_class: "light", "medium" or "heavy"
            digestion_estimate: Optional digestion time (e.g., "2 hours")
            logged_at: Optional local time label (e.g., "08:30")

        Returns:
            The created entry and updated dashboard
        """
        if calories_kcal is None:
            calories_kcal = calculate_calories_from_macros(protein_g, carbs_g, fat_g)
        if weight_class not in {w.value for w in WeightClass}:
            return {"error": "weight_class must be 'light', 'medium' or 'heavy'."}
        item = {
            "id": f"custom:{name.lower()}",
            "name": name,
            "calories_kcal": calories_kcal,
            "protein_g": protein_g,
            "carbs_g": carbs_g,
            "fat_g": fat_g,
            "weight_class": weight_class,
            "digestion_estimate": digestion_estimate,
        }
        return self._log(item, logged_at)

    def _log(self, item, logged_at: str | None) -> dict:
        try:
            entry = self.ledger.log_food(item, timestamp=logged_at)
        except InvalidFoodItem:
            return {"error": "Invalid food. Nutrient values must be non-negative."}
        except PersistenceError:
            return {
                "dashboard": self._dashboard(),
                "warning": "Food logged but could not be saved. Please try again.",
            }
        return {"entry": _entry_dict(entry), "dashboard": self._dashboard()}

    # ==================== Query Tools ====================

    def _dashboard(self) -> dict:
        view = self.ledger.get_dashboard_view(self.preview_count)
        return {
            "remaining_calories": view.remaining_calories,
            "progress_percent": round(view.progress_percent, 1),
            "exceeded_goal": view.exceeded_goal,
            "totals": view.totals.model_dump(),
            "goals": view.goals.model_dump(),
            "recent_entries": [_entry_dict(e) for e in view.recent_entries],
        }

    def get_today(self) -> dict:
        """Get today's dashboard: totals, goals, remaining calories and recent foods.

        Returns:
            Dictionary with date and dashboard
        """
        dashboard = self._dashboard()
        result = {"date": self.ledger.day_key, "dashboard": dashboard}
        if self.ledger.profile is None:
            result["warning"] = "No profile configured. Goals are defaults; use setup_profile."
        if self.ledger.needs_flush:
            result["warning"] = UNSAVED_WARNING
        return result

    def get_full_log(self) -> dict:
        """Get every food logged today, most recent first.

        Returns:
            Dictionary with date and entries
        """
        entries = self.ledger.get_full_log()
        result = {"date": self.ledger.day_key, "entries": [_entry_dict(e) for e in entries]}
        if self.ledger.needs_flush:
            result["warning"] = UNSAVED_WARNING
        return result

    def clear_log(self) -> dict:
        """Delete all of today's entries.

        Returns:
            Confirmation
        """
        try:
            self.ledger.clear_log()
        except PersistenceError:
            return {"warning": "Log cleared but could not be saved. Please try again."}
        return {"success": True}

    def reset_profile(self) -> dict:
        """Reset everything: profile, goals and today's log.

        Returns:
            Confirmation
        """
        try:
            self.ledger.reset()
        except PersistenceError:
            return {"warning": "Reset applied but could not be saved. Please try again."}
        return {"success": True}


def build_server(tools: LedgerTools) -> FastMCP:
    """Create a FastMCP server exposing the given tools."""
    mcp = FastMCP(
        "nutriledger",
        instructions=INSTRUCTIONS,
        stateless_http=True,
        transport_security=transport_security,
    )
    for fn in (
        tools.setup_profile,
        tools.get_profile,
        tools.search_food,
        tools.scan_food,
        tools.log_catalog_food,
        tools.log_food,
        tools.get_today,
        tools.get_full_log,
        tools.clear_log,
        tools.reset_profile,
    ):
        mcp.tool()(fn)
    return mcp
