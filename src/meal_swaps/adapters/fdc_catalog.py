"""Nutrient catalog backed by USDA FoodData Central."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

import httpx

from meal_swaps.adapters.fdc_client import FdcClient
from meal_swaps.domain.errors import FoodNotFoundError, ServiceUnavailableError
from meal_swaps.domain.nutrition import NutrientProfile
from meal_swaps.services.cache import Cache
from meal_swaps.services.catalog import CatalogFood, NutrientCatalog

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein_g": 1003,
    "fat_g": 1004,
    "carbs_g": 1005,
    "fiber_g": 1079,
    "sugar_g": 2000,
}

# Statuses that mean the service as a whole is unusable, not just one query.
_UNAVAILABLE_STATUSES = {401, 403, 429}
_RETRYABLE_STATUSES = {429}

_logger = logging.getLogger(__name__)


@dataclass
class FdcNutrientCatalog(NutrientCatalog):
    """Catalog that resolves foods through FDC search with caching.

    A food's group is its FDC ``foodCategory``. Group search queries FDC with
    the group name and keeps hits from that category.
    """

    fdc_client: FdcClient
    cache: Cache
    page_size: int = 25
    ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup(self, name: str) -> NutrientProfile | None:
        """Return the per-100g profile of the best FDC match."""
        food = await self._find_food(name)
        return food.profile if food else None

    async def food_group_of(self, name: str) -> str | None:
        """Return the FDC food category of the best match."""
        food = await self._find_food(name)
        return food.group if food else None

    async def search_by_group(self, group: str) -> list[str]:
        """Return foods in an FDC food category."""
        wanted = group.strip().lower()
        foods = await self._search(group)
        return _unique_names(
            food for food in foods if food.group and food.group.lower() == wanted
        )

    async def search_by_text(self, text: str) -> list[str]:
        """Return foods whose description contains the text."""
        needle = text.strip().lower()
        if not needle:
            return []
        foods = await self._search(text)
        return _unique_names(food for food in foods if needle in food.name.lower())

    async def _find_food(self, name: str) -> CatalogFood | None:
        cache_key = f"fdc:food:{name.strip().lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, CatalogFood):
            return cached
        foods = await self._search(name)
        if not foods:
            return None
        wanted = name.strip().lower()
        match = next((food for food in foods if food.name.lower() == wanted), foods[0])
        self.cache.set(cache_key, match, ttl_seconds=self.ttl_seconds)
        return match

    async def _search(self, query: str) -> list[CatalogFood]:
        cache_key = f"fdc:search:{query.strip().lower()}:{self.page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=self.page_size),
            action=f"search:{query}",
        )
        foods: list[CatalogFood] = []
        for raw in payload.get("foods", []) or []:
            food = _parse_food(raw)
            if food is not None:
                foods.append(food)
        self.cache.set(cache_key, foods, ttl_seconds=self.ttl_seconds)
        _logger.debug("FDC search: query=%s results=%s", query, len(foods))
        return foods

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call FDC with a short retry and map failures to catalog errors."""
        attempt = 0
        while True:
            try:
                return await func()
            except (httpx.TransportError, httpx.HTTPStatusError) as exc:
                attempt += 1
                status_code = _status_code(exc)
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    status_code if status_code is not None else "n/a",
                    exc,
                )
                retryable = (
                    status_code is None
                    or status_code >= 500  # noqa: PLR2004
                    or status_code in _RETRYABLE_STATUSES
                )
                if retryable and attempt <= self.retry_attempts:
                    await asyncio.sleep(self.retry_delay_seconds)
                    continue
                if status_code is None or status_code >= 500:  # noqa: PLR2004
                    raise ServiceUnavailableError(f"FDC unreachable: {exc}") from exc
                if status_code in _UNAVAILABLE_STATUSES:
                    raise ServiceUnavailableError(
                        f"FDC rejected requests (status {status_code})"
                    ) from exc
                raise FoodNotFoundError(f"FDC {action} failed: {exc}") from exc


def _status_code(exc: Exception) -> int | None:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    return status_code if isinstance(status_code, int) else None


def _parse_food(raw: object) -> CatalogFood | None:
    if not isinstance(raw, dict):
        return None
    description = str(raw.get("description") or "").strip()
    if not description:
        return None
    return CatalogFood(
        name=description,
        profile=_extract_profile(raw.get("foodNutrients") or []),
        group=_category_name(raw.get("foodCategory")),
    )


def _category_name(raw: object) -> str | None:
    if isinstance(raw, dict):
        raw = raw.get("description")
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def _extract_profile(food_nutrients: list[dict[str, object]]) -> NutrientProfile:
    """Extract per-100g macros from FDC search or detail nutrients."""
    by_id = {nutrient_id: field for field, nutrient_id in _NUTRIENT_IDS.items()}
    values: dict[str, float] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("value", nutrient.get("amount"))
        field = by_id.get(nutrient_id)
        if field is None or not isinstance(amount, int | float):
            continue
        values[field] = max(0.0, float(amount))
    return NutrientProfile(
        calories=values.get("calories", 0.0),
        protein_g=values.get("protein_g", 0.0),
        carbs_g=values.get("carbs_g", 0.0),
        fat_g=values.get("fat_g", 0.0),
        fiber_g=values.get("fiber_g", 0.0),
        sugar_g=values.get("sugar_g"),
    )


def _unique_names(foods: Iterable[CatalogFood]) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()
    for food in foods:
        key = food.name.lower()
        if key not in seen:
            seen.add(key)
            names.append(food.name)
    return names
