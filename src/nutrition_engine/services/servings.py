"""Serving and gram conversions for logged food items.

Both directions produce a complete :class:`ServingEditResult` that replaces
the item's numeric fields as a whole. Grams mode stores ``serving_grams = 1``
and keeps the real serving weight in ``original_serving_grams`` so it can be
restored when the item goes back to servings.
"""

from dataclasses import dataclass

from nutrition_engine.domain.food_log import BaseUnit, FoodLogItem, ServingEditResult
from nutrition_engine.services.rounding import (
    round_hundredth,
    round_int,
    round_tenth,
    round_to_int_grams,
    round_to_tenth_servings,
)

DEFAULT_SERVING_GRAMS = 100.0


@dataclass(frozen=True)
class MacrosPerGram:
    """Per-gram rates derived from an item's absolute macros."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None


def calculate_total_grams(item: FoodLogItem) -> float:
    return item.computed_total_grams


def serving_weight(item: FoodLogItem) -> float:
    """Return the per-serving gram weight, never the grams-mode sentinel."""
    return _recorded_serving_weight(item) or DEFAULT_SERVING_GRAMS


def macros_per_gram(item: FoodLogItem) -> MacrosPerGram:
    """Divide each absolute macro by the item's total grams."""
    total = item.computed_total_grams
    if total <= 0:
        return MacrosPerGram(
            calories=0.0,
            protein_g=0.0,
            carbs_g=0.0,
            fat_g=0.0,
            fiber_g=None if item.fiber_g is None else 0.0,
            sugar_g=None if item.sugar_g is None else 0.0,
            sodium_mg=None if item.sodium_mg is None else 0.0,
        )
    return MacrosPerGram(
        calories=item.calories / total,
        protein_g=item.protein_g / total,
        carbs_g=item.carbs_g / total,
        fat_g=item.fat_g / total,
        fiber_g=_divide(item.fiber_g, total),
        sugar_g=_divide(item.sugar_g, total),
        sodium_mg=_divide(item.sodium_mg, total),
    )


def compute_servings_change(
    original_item: FoodLogItem, edited_quantity: float, edited_unit: BaseUnit
) -> ServingEditResult:
    """Rescale an item to a new quantity in servings or grams.

    Grams edits scale from per-gram rates so several small gram edits in a
    row do not compound rounding. Serving edits scale the item's absolute
    macros by the ratio of new to old total grams.
    """
    if edited_unit == "grams":
        quantity = round_hundredth(round_to_int_grams(edited_quantity))
        rates = macros_per_gram(original_item)
        grams = max(quantity, 0.0)
        return ServingEditResult(
            quantity=quantity,
            serving_grams=1.0,
            base_unit="grams",
            display_serving_size=_format_grams(quantity),
            total_grams=quantity,
            calories=round_int(rates.calories * grams),
            protein_g=round_tenth(rates.protein_g * grams),
            carbs_g=round_tenth(rates.carbs_g * grams),
            fat_g=round_tenth(rates.fat_g * grams),
            fiber_g=_scale_tenth(rates.fiber_g, grams),
            sugar_g=_scale_tenth(rates.sugar_g, grams),
            sodium_mg=_scale_int(rates.sodium_mg, grams),
            original_serving_grams=_recorded_serving_weight(original_item),
        )

    weight = serving_weight(original_item)
    quantity = round_hundredth(round_to_tenth_servings(edited_quantity))
    total_grams = quantity * weight
    old_total = original_item.computed_total_grams
    ratio = max(total_grams, 0.0) / old_total if old_total > 0 else 0.0
    return ServingEditResult(
        quantity=quantity,
        serving_grams=weight,
        base_unit="serving",
        display_serving_size=_format_servings(quantity),
        total_grams=total_grams,
        calories=round_int(original_item.calories * ratio),
        protein_g=round_tenth(original_item.protein_g * ratio),
        carbs_g=round_tenth(original_item.carbs_g * ratio),
        fat_g=round_tenth(original_item.fat_g * ratio),
        fiber_g=_scale_tenth(original_item.fiber_g, ratio),
        sugar_g=_scale_tenth(original_item.sugar_g, ratio),
        sodium_mg=_scale_int(original_item.sodium_mg, ratio),
        original_serving_grams=weight,
    )


def toggle_unit(item: FoodLogItem, unit: BaseUnit) -> ServingEditResult:
    """Switch display units while keeping the item's total grams."""
    if unit == item.base_unit:
        return compute_servings_change(item, item.quantity, unit)
    if unit == "grams":
        return compute_servings_change(
            item, round_to_int_grams(item.computed_total_grams), "grams"
        )
    servings = grams_to_servings(item.computed_total_grams, serving_weight(item))
    return compute_servings_change(item, servings, "serving")


def grams_to_servings(grams: float, gram_weight: float) -> float:
    """Convert grams to servings at 0.1 precision; 1 when weight is unknown."""
    if gram_weight <= 0:
        return 1.0
    return round_to_tenth_servings(grams / gram_weight)


def format_serving_size(item: FoodLogItem) -> str:
    if item.base_unit == "grams":
        return _format_grams(item.quantity)
    return _format_servings(item.quantity)


def format_servings_and_grams(item: FoodLogItem) -> str:
    """Render e.g. ``"1.5 servings (60 g)"`` or ``"60 g"``."""
    grams = round_to_int_grams(item.computed_total_grams)
    if item.base_unit == "grams":
        return f"{grams} g"
    return f"{_format_servings(item.quantity)} ({grams} g)"


def _recorded_serving_weight(item: FoodLogItem) -> float | None:
    if item.original_serving_grams and item.original_serving_grams > 0:
        return item.original_serving_grams
    if item.base_unit == "serving" and item.serving_grams > 0:
        return item.serving_grams
    return None


def _format_grams(quantity: float) -> str:
    return f"{round_to_int_grams(quantity)}g"


def _format_servings(quantity: float) -> str:
    suffix = "" if quantity == 1 else "s"
    return f"{_format_number(quantity)} serving{suffix}"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _divide(value: float | None, total: float) -> float | None:
    return None if value is None else value / total


def _scale_tenth(value: float | None, factor: float) -> float | None:
    return None if value is None else round_tenth(value * factor)


def _scale_int(value: float | None, factor: float) -> int | None:
    return None if value is None else round_int(value * factor)
