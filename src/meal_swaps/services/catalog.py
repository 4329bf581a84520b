"""Nutrient catalog interface and an in-memory implementation."""

from dataclasses import dataclass, field
from typing import Protocol

from meal_swaps.domain.nutrition import NutrientProfile


class NutrientCatalog(Protocol):
    """Read-only access to per-100g food profiles and food groups."""

    async def lookup(self, name: str) -> NutrientProfile | None:
        """Return the per-100g profile for a food, if known."""

    async def food_group_of(self, name: str) -> str | None:
        """Return the food group of a food, if known."""

    async def search_by_group(self, group: str) -> list[str]:
        """Return food names belonging to a group."""

    async def search_by_text(self, text: str) -> list[str]:
        """Return food names containing a substring."""


@dataclass(frozen=True)
class CatalogFood:
    """Catalog entry."""

    name: str
    profile: NutrientProfile
    group: str | None = None


@dataclass
class InMemoryNutrientCatalog(NutrientCatalog):
    """Catalog held in a dict; names match case-insensitively."""

    _foods: dict[str, CatalogFood] = field(default_factory=dict)

    @classmethod
    def from_foods(cls, foods: "list[CatalogFood]") -> "InMemoryNutrientCatalog":
        """Create a catalog from a list of entries."""
        catalog = cls()
        for food in foods:
            catalog.add(food)
        return catalog

    def add(self, food: CatalogFood) -> None:
        """Add or replace an entry."""
        self._foods[_key(food.name)] = food

    def __len__(self) -> int:
        return len(self._foods)

    async def lookup(self, name: str) -> NutrientProfile | None:
        food = self._foods.get(_key(name))
        return food.profile if food else None

    async def food_group_of(self, name: str) -> str | None:
        food = self._foods.get(_key(name))
        return food.group if food else None

    async def search_by_group(self, group: str) -> list[str]:
        wanted = _key(group)
        return sorted(
            food.name
            for food in self._foods.values()
            if food.group and _key(food.group) == wanted
        )

    async def search_by_text(self, text: str) -> list[str]:
        needle = _key(text)
        if not needle:
            return []
        return sorted(
            food.name for key, food in self._foods.items() if needle in key
        )


def _key(name: str) -> str:
    return " ".join(name.lower().split())
