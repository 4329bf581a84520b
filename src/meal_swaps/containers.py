"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from meal_swaps.adapters.fdc_catalog import FdcNutrientCatalog
from meal_swaps.adapters.fdc_client import HttpxFdcClient
from meal_swaps.config import Settings
from meal_swaps.services.cache import TtlCache
from meal_swaps.services.catalog import NutrientCatalog
from meal_swaps.services.engine import SwapEngine
from meal_swaps.services.goals import GoalPolicy
from meal_swaps.services.units import MeasureTableConverter, UnitConverter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: NutrientCatalog
    converter: UnitConverter
    goal_policy: GoalPolicy
    swap_engine: SwapEngine
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    catalog = FdcNutrientCatalog(
        fdc_client=fdc_client,
        cache=TtlCache(),
        page_size=resolved_settings.fdc_page_size,
        ttl_seconds=resolved_settings.catalog_cache_ttl_seconds,
    )
    converter = MeasureTableConverter(
        default_density_g_per_ml=resolved_settings.default_density_g_per_ml
    )
    swap_engine = SwapEngine.create(
        catalog,
        converter,
        candidate_limit=resolved_settings.candidate_limit,
        max_results=resolved_settings.max_suggestions,
        timeout_seconds=resolved_settings.suggest_timeout_seconds,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        converter=converter,
        goal_policy=resolved_settings.goal_policy(),
        swap_engine=swap_engine,
        close_resources=close_resources,
    )
