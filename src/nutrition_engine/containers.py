"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_engine.adapters.fdc_client import HttpxFdcClient
from nutrition_engine.adapters.memory_food_log_repository import (
    InMemoryFoodLogRepository,
)
from nutrition_engine.config import Settings
from nutrition_engine.services.cache import InMemoryCache
from nutrition_engine.services.food_log import FoodLogService
from nutrition_engine.services.nutrition import NutritionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        food_ttl_seconds=resolved_settings.food_cache_ttl_seconds,
        debug=resolved_settings.nutrition_debug,
        retry_attempts=resolved_settings.fdc_retry_attempts,
    )
    food_log_service = FoodLogService(InMemoryFoodLogRepository())

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )
