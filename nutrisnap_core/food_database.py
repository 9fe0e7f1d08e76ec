"""Food lookup backends used by the findFoodItem tool."""
from typing import List, Protocol

from .schemas import FoodItem

FOOD_CATALOG = (
    {
        "name": "Apple",
        "nutrition": {"calories": 95, "protein": 0.3, "carbs": 25, "fat": 0.3},
    },
    {
        "name": "Chicken Breast",
        "nutrition": {"calories": 165, "protein": 31, "carbs": 0, "fat": 3.6},
    },
)


def _catalog_items() -> List[FoodItem]:
    return [FoodItem.model_validate(entry) for entry in FOOD_CATALOG]


class FoodLookupService(Protocol):
    async def search(self, query: str) -> List[FoodItem]:
        ...


class StubFoodDatabase:
    """Placeholder backend: returns the whole catalog whatever the query."""

    async def search(self, query: str) -> List[FoodItem]:
        return _catalog_items()


class CatalogFoodDatabase:
    """In-memory backend that filters the catalog by name.

    A query matches an item when either one contains the other,
    case-insensitively ("apple" matches "Apple", "grilled chicken breast"
    matches "Chicken Breast"). No match yields an empty list.
    """

    async def search(self, query: str) -> List[FoodItem]:
        needle = " ".join(query.lower().split())
        if not needle:
            return []
        return [
            item
            for item in _catalog_items()
            if needle in item.name.lower() or item.name.lower() in needle
        ]


FOOD_LOOKUP_BACKENDS = {
    "stub": StubFoodDatabase,
    "catalog": CatalogFoodDatabase,
}


def build_food_lookup(name: str = "stub") -> FoodLookupService:
    try:
        return FOOD_LOOKUP_BACKENDS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown food lookup backend '{name}'. Choose one of: {', '.join(FOOD_LOOKUP_BACKENDS)}"
        ) from None
