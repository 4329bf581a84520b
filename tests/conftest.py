"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from meal_swaps.config import Settings
from meal_swaps.containers import AppContainer
from meal_swaps.domain.errors import FoodNotFoundError, ServiceUnavailableError
from meal_swaps.domain.nutrition import NutrientProfile
from meal_swaps.services.catalog import (
    CatalogFood,
    InMemoryNutrientCatalog,
    NutrientCatalog,
)
from meal_swaps.services.engine import SwapEngine
from meal_swaps.services.goals import GoalPolicy
from meal_swaps.services.units import MeasureTableConverter

BAKED = "Baked Products"
DAIRY = "Dairy and Egg Products"
POULTRY = "Poultry Products"
GRAINS = "Cereal Grains and Pasta"


def _food(  # noqa: PLR0913
    name: str,
    calories: float,
    protein_g: float,
    carbs_g: float,
    fat_g: float,
    fiber_g: float,
    group: str | None,
    sugar_g: float | None = None,
) -> CatalogFood:
    return CatalogFood(
        name=name,
        profile=NutrientProfile(
            calories=calories,
            protein_g=protein_g,
            carbs_g=carbs_g,
            fat_g=fat_g,
            fiber_g=fiber_g,
            sugar_g=sugar_g,
        ),
        group=group,
    )


CATALOG_FOODS = [
    _food("white bread", 265, 9.0, 49.0, 3.2, 2.7, BAKED, 5.0),
    _food("whole wheat bread", 212, 13.0, 41.0, 3.4, 6.0, BAKED, 4.4),
    _food("light white bread", 200, 9.0, 40.0, 2.0, 2.7, BAKED, 4.0),
    _food("rye bread", 259, 8.5, 48.3, 3.3, 5.8, BAKED, 3.9),
    _food("bagel", 250, 10.0, 49.0, 1.5, 2.1, BAKED, 6.0),
    _food("whole milk", 61, 3.2, 4.8, 3.3, 0.0, DAIRY, 5.1),
    _food("skim milk", 34, 3.4, 5.0, 0.1, 0.0, DAIRY, 5.1),
    _food("cheddar cheese", 403, 25.0, 1.3, 33.0, 0.0, DAIRY, 0.5),
    _food("chicken breast", 165, 31.0, 0.0, 3.6, 0.0, POULTRY),
    _food("chicken thigh", 209, 26.0, 0.0, 10.9, 0.0, POULTRY),
    _food("all-purpose flour", 364, 10.3, 76.3, 1.0, 2.7, GRAINS),
    _food("oat bran", 246, 17.3, 66.0, 7.0, 15.4, GRAINS),
    _food("oat milk", 43, 1.0, 7.0, 1.5, 0.8, "Beverages"),
    _food("oat porridge", 71, 2.5, 12.0, 1.5, 1.7, None),
    _food("mystery stew", 120, 8.0, 10.0, 5.0, 2.0, None),
]


@dataclass
class UnreachableCatalog(NutrientCatalog):
    """Catalog whose backend is down for every call."""

    async def lookup(self, name: str) -> NutrientProfile | None:
        raise ServiceUnavailableError("catalog offline")

    async def food_group_of(self, name: str) -> str | None:
        raise ServiceUnavailableError("catalog offline")

    async def search_by_group(self, group: str) -> list[str]:
        raise ServiceUnavailableError("catalog offline")

    async def search_by_text(self, text: str) -> list[str]:
        raise ServiceUnavailableError("catalog offline")


@dataclass
class SlowGroupCatalog(NutrientCatalog):
    """Delegating catalog that stalls group searches for chosen groups."""

    inner: NutrientCatalog
    slow_groups: set[str] = field(default_factory=set)
    delay_seconds: float = 5.0
    group_calls: list[str] = field(default_factory=list)

    async def lookup(self, name: str) -> NutrientProfile | None:
        return await self.inner.lookup(name)

    async def food_group_of(self, name: str) -> str | None:
        return await self.inner.food_group_of(name)

    async def search_by_group(self, group: str) -> list[str]:
        self.group_calls.append(group)
        if group in self.slow_groups:
            await asyncio.sleep(self.delay_seconds)
        return await self.inner.search_by_group(group)

    async def search_by_text(self, text: str) -> list[str]:
        return await self.inner.search_by_text(text)


@dataclass
class FailingGroupCatalog(NutrientCatalog):
    """Delegating catalog that loses connectivity on group searches."""

    inner: NutrientCatalog

    async def lookup(self, name: str) -> NutrientProfile | None:
        return await self.inner.lookup(name)

    async def food_group_of(self, name: str) -> str | None:
        return await self.inner.food_group_of(name)

    async def search_by_group(self, group: str) -> list[str]:
        raise ServiceUnavailableError("catalog connection reset")

    async def search_by_text(self, text: str) -> list[str]:
        return await self.inner.search_by_text(text)


@dataclass
class BrokenEntryCatalog(NutrientCatalog):
    """Delegating catalog whose lookups fail for chosen foods."""

    inner: NutrientCatalog
    broken: set[str] = field(default_factory=set)

    async def lookup(self, name: str) -> NutrientProfile | None:
        if name in self.broken:
            raise FoodNotFoundError(f"bad entry for {name}")
        return await self.inner.lookup(name)

    async def food_group_of(self, name: str) -> str | None:
        return await self.inner.food_group_of(name)

    async def search_by_group(self, group: str) -> list[str]:
        return await self.inner.search_by_group(group)

    async def search_by_text(self, text: str) -> list[str]:
        return await self.inner.search_by_text(text)


@dataclass
class SlowLookupCatalog(NutrientCatalog):
    """Delegating catalog that stalls lookups of chosen foods."""

    inner: NutrientCatalog
    slow_names: set[str] = field(default_factory=set)
    delay_seconds: float = 5.0

    async def lookup(self, name: str) -> NutrientProfile | None:
        if name in self.slow_names:
            await asyncio.sleep(self.delay_seconds)
        return await self.inner.lookup(name)

    async def food_group_of(self, name: str) -> str | None:
        return await self.inner.food_group_of(name)

    async def search_by_group(self, group: str) -> list[str]:
        return await self.inner.search_by_group(group)

    async def search_by_text(self, text: str) -> list[str]:
        return await self.inner.search_by_text(text)


@pytest.fixture
def catalog() -> InMemoryNutrientCatalog:
    return InMemoryNutrientCatalog.from_foods(CATALOG_FOODS)


@pytest.fixture
def converter() -> MeasureTableConverter:
    converter = MeasureTableConverter()
    converter.add_measure("white bread", "1 slice", 25.0)
    converter.set_density("whole milk", 1.03)
    return converter


@pytest.fixture
def engine(
    catalog: InMemoryNutrientCatalog, converter: MeasureTableConverter
) -> SwapEngine:
    return SwapEngine.create(catalog, converter)


@pytest.fixture
def settings() -> Settings:
    return Settings(fdc_api_key="fdc-key")


@pytest.fixture
def container(
    settings: Settings,
    catalog: InMemoryNutrientCatalog,
    converter: MeasureTableConverter,
) -> AppContainer:
    engine = SwapEngine.create(
        catalog,
        converter,
        candidate_limit=settings.candidate_limit,
        max_results=settings.max_suggestions,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog=catalog,
        converter=converter,
        goal_policy=GoalPolicy(),
        swap_engine=engine,
        close_resources=close_resources,
    )
