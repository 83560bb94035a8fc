"""Nutrition service integrating USDA FDC lookups with validation."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from nutrition_engine.adapters.fdc_client import FdcClient
from nutrition_engine.domain.food_log import BaseUnit, FoodLogItem
from nutrition_engine.domain.nutrition import (
    FoodDetails,
    FoodSummary,
    MacroField,
    NutritionAssessment,
    RejectionReason,
)
from nutrition_engine.services.cache import Cache
from nutrition_engine.services.normalizer import (
    default_serving_grams,
    is_foundation_food,
    normalize_fdc_nutrition,
    scale_to_serving,
)
from nutrition_engine.services.servings import (
    DEFAULT_SERVING_GRAMS,
    compute_servings_change,
)
from nutrition_engine.services.validation import assess_nutrition

_logger = logging.getLogger(__name__)

_REJECTION_MESSAGES: dict[RejectionReason, str] = {
    "empty": "Cannot import: no nutrition data",
    "insufficient": "Cannot import: too many missing nutrition fields",
    "inconsistent": "Cannot import: calories do not match macros",
}

_T = TypeVar("_T")

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence


class NutritionError(Exception):
    """Base error for nutrition lookups and imports."""


class NutritionImportError(NutritionError):
    """Raised when an FDC record cannot be turned into a food log item."""

    def __init__(
        self,
        fdc_id: int,
        reason: RejectionReason,
        missing_macros: tuple[MacroField, ...] = (),
    ) -> None:
        self.fdc_id = fdc_id
        self.reason = reason
        self.missing_macros = missing_macros
        message = _REJECTION_MESSAGES[reason]
        if missing_macros:
            message = f"{message} (missing: {', '.join(missing_macros)})"
        super().__init__(message)


@dataclass
class NutritionService:
    """Service for nutrition lookups with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(
        self,
        query: str,
        limit: int = 5,
        data_types: "Sequence[str] | None" = None,
    ) -> list[FoodSummary]:
        """Search FDC foods with caching, optionally by FDC data type."""
        type_key = ",".join(data_types) if data_types else "all"
        cache_key = f"fdc:search:{query.lower()}:{limit}:{type_key}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(
                query, page_size=limit, data_types=data_types
            ),
            action="search",
        )
        foods = [_summary_from_payload(food) for food in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Nutrition search FDC: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FoodDetails:
        """Retrieve a food with normalized, not yet validated, nutrition."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        details = _details_from_payload(payload)
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        if self.debug:
            _logger.info(
                "Nutrition food FDC: fdc_id=%s basis=%s completeness=%s",
                fdc_id,
                details.nutrition.basis,
                details.nutrition.completeness,
            )
        return details

    async def get_foods(self, fdc_ids: "Sequence[int]") -> list[FoodDetails]:
        """Retrieve several foods, fetching only uncached ids in one request.

        Ids the API does not return are left out; order follows ``fdc_ids``.
        """
        found: dict[int, FoodDetails] = {}
        missing: list[int] = []
        for fdc_id in dict.fromkeys(fdc_ids):
            cached = self.cache.get(f"fdc:food:{fdc_id}")
            if isinstance(cached, FoodDetails):
                found[fdc_id] = cached
            else:
                missing.append(fdc_id)

        if missing:
            payloads = await self._call_with_retry(
                lambda: self.fdc_client.get_foods(missing),
                action=f"get_foods:{len(missing)}",
            )
            for payload in payloads:
                details = _details_from_payload(payload)
                found[details.summary.fdc_id] = details
                self.cache.set(
                    f"fdc:food:{details.summary.fdc_id}",
                    details,
                    ttl_seconds=self.food_ttl_seconds,
                )
        return [found[fdc_id] for fdc_id in fdc_ids if fdc_id in found]

    async def assess_food(self, fdc_id: int) -> NutritionAssessment:
        """Fetch a food and run validation and inference on it."""
        details = await self.get_food(fdc_id)
        return assess_nutrition(details.nutrition)

    async def import_food(
        self, fdc_id: int, quantity: float = 1.0, unit: BaseUnit = "serving"
    ) -> FoodLogItem:
        """Build a food log item from an FDC food, or raise if unusable."""
        details = await self.get_food(fdc_id)
        assessment = assess_nutrition(details.nutrition)
        nutrition = assessment.nutrition
        if assessment.rejection is not None or nutrition is None:
            raise NutritionImportError(
                fdc_id,
                assessment.rejection or "insufficient",
                assessment.validation.missing_macros,
            )
        if nutrition.used_inference:
            _logger.info(
                "Imported fdc_id=%s with estimated fields: %s",
                fdc_id,
                ",".join(nutrition.estimated_fields),
            )

        serving_grams = details.serving_size_g or DEFAULT_SERVING_GRAMS
        if nutrition.basis == "per_100g":
            if details.serving_size_g and not _is_foundation(details.summary):
                nutrition = scale_to_serving(nutrition, details.serving_size_g)
            else:
                serving_grams = DEFAULT_SERVING_GRAMS

        # Validation guarantees the four macros are present here.
        item = FoodLogItem(
            name=details.summary.description,
            quantity=1.0,
            base_unit="serving",
            serving_grams=serving_grams,
            calories=nutrition.calories or 0.0,
            protein_g=nutrition.protein_g or 0.0,
            carbs_g=nutrition.carbs_g or 0.0,
            fat_g=nutrition.fat_g or 0.0,
            fiber_g=nutrition.fiber_g,
            sugar_g=nutrition.sugar_g,
            sodium_mg=nutrition.sodium_mg,
            serving_size="1 serving",
            original_serving_grams=serving_grams,
            source_ref=str(fdc_id),
        )
        if quantity == 1 and unit == "serving":
            return item
        return compute_servings_change(item, quantity, unit).apply_to(item)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[_T]]", *, action: str
    ) -> _T:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _summary_from_payload(payload: dict[str, object]) -> FoodSummary:
    return FoodSummary(
        fdc_id=int(payload["fdcId"]),
        description=str(payload.get("description") or ""),
        brand_owner=payload.get("brandOwner"),
        brand_name=payload.get("brandName"),
        data_type=payload.get("dataType"),
    )


def _details_from_payload(payload: dict[str, object]) -> FoodDetails:
    return FoodDetails(
        summary=_summary_from_payload(payload),
        nutrition=normalize_fdc_nutrition(payload),
        serving_size_g=default_serving_grams(payload),
    )


def _is_foundation(summary: FoodSummary) -> bool:
    return is_foundation_food({"dataType": summary.data_type})


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
