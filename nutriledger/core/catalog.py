"""Food Catalog - Read-only food source and detection capability.

The catalog is static data; the ledger never mutates it. Detection is modeled
as an injectable capability so callers and tests can swap the source.
"""

import random
from typing import Any, Iterable, Mapping, Optional, Protocol

from pydantic import ValidationError

from .errors import InvalidFoodItem, NotFound
from .models import FoodItem, WeightClass


def parse_food_item(data: Mapping[str, Any]) -> FoodItem:
    """Build a FoodItem from raw input.

    Raises:
        InvalidFoodItem: If any field is missing or a nutrient is negative
    """
    try:
        return FoodItem.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidFoodItem(str(e)) from e


class FoodCatalog:
    """Queryable, immutable set of FoodItems."""

    def __init__(self, items: Iterable[FoodItem]) -> None:
        self._items: tuple[FoodItem, ...] = tuple(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def search(self, query: str) -> list[FoodItem]:
        """All foods whose name contains the query, case-insensitive.

        A blank query matches nothing.
        """
        query_lower = query.strip().lower()
        if not query_lower:
            return []
        return [f for f in self._items if query_lower in f.name.lower()]

    def find_by_name(self, query: str) -> FoodItem:
        """First food whose name contains the query.

        Args:
            query: Substring to look for (case-insensitive)

        Returns:
            The first matching FoodItem in catalog order

        Raises:
            NotFound: If nothing matches
        """
        matches = self.search(query)
        if not matches:
            raise NotFound(f"No food matching {query!r}")
        return matches[0]

    def get(self, food_id: str) -> FoodItem:
        """Look up a food by id.

        Raises:
            NotFound: If the id is unknown
        """
        for item in self._items:
            if item.id == food_id:
                return item
        raise NotFound(f"No food with id {food_id!r}")

    def random_item(self, rng: Optional[random.Random] = None) -> FoodItem:
        """Pick a food at random.

        Non-deterministic unless a seeded ``random.Random`` is supplied.

        Raises:
            NotFound: If the catalog is empty
        """
        if not self._items:
            raise NotFound("Catalog is empty")
        return (rng or random).choice(self._items)


class FoodDetector(Protocol):
    """Turns an image (or any capture input) into a recognised food."""

    def detect(self, image: Any) -> FoodItem:
        ...


class RandomCatalogDetector:
    """Stand-in detector that returns a random catalog food.

    Ignores the image entirely. Pass a seeded ``random.Random`` for
    repeatable results.
    """

    def __init__(self, catalog: FoodCatalog, rng: Optional[random.Random] = None) -> None:
        self._catalog = catalog
        self._rng = rng or random.Random()

    def detect(self, image: Any) -> FoodItem:
        return self._catalog.random_item(self._rng)


def _food(id: str, name: str, cals: float, pro: float, carb: float, fat: float,
          weight_class: WeightClass, digest: str) -> FoodItem:
    return FoodItem(
        id=id,
        name=name,
        calories_kcal=cals,
        protein_g=pro,
        carbs_g=carb,
        fat_g=fat,
        weight_class=weight_class,
        digestion_estimate=digest,
    )


DEFAULT_CATALOG = FoodCatalog([
    _food("1", "Apple", 52, 0.3, 14, 0.2, WeightClass.LIGHT, "45 mins"),
    _food("2", "Banana", 89, 1.1, 22.8, 0.3, WeightClass.LIGHT, "45 mins"),
    _food("3", "Chicken Biryani", 292, 12, 35, 11, WeightClass.HEAVY, "3-4 hours"),
    _food("4", "Dal Makhani", 300, 10, 25, 18, WeightClass.HEAVY, "4 hours"),
    _food("5", "Oatmeal", 68, 2.4, 12, 1.4, WeightClass.MEDIUM, "2 hours"),
    _food("6", "Grilled Chicken", 165, 31, 0, 3.6, WeightClass.MEDIUM, "2.5 hours"),
    _food("7", "Paneer Tikka", 260, 18, 6, 19, WeightClass.HEAVY, "4 hours"),
    _food("8", "Rice (White)", 130, 2.7, 28, 0.3, WeightClass.MEDIUM, "2 hours"),
    _food("9", "Chapati", 120, 3, 18, 4, WeightClass.MEDIUM, "2 hours"),
    _food("10", "Egg (Boiled)", 155, 13, 1.1, 11, WeightClass.LIGHT, "1.5 hours"),
])
