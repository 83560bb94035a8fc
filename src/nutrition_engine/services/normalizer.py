"""Normalization of USDA FoodData Central nutrient records."""

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace

from nutrition_engine.domain.nutrition import (
    Basis,
    Completeness,
    NormalizedNutrition,
)
from nutrition_engine.services.rounding import round_int, round_tenth

_logger = logging.getLogger(__name__)

_FOUNDATION_DATA_TYPES = {"Foundation", "SR Legacy"}
_GRAM_UNITS = {"g", "gm", "grm", "gram", "grams"}

Nutrient = Mapping[str, object]
Extractor = Callable[[Sequence[Nutrient]], float | None]


@dataclass(frozen=True)
class _FieldSpec:
    attr: str
    label_key: str
    nutrient_id: int
    alternate_id: int
    names: tuple[str, ...]
    rounder: Callable[[float], float]


_FIELDS: tuple[_FieldSpec, ...] = (
    _FieldSpec("calories", "calories", 1008, 208, ("energy",), round_int),
    _FieldSpec("protein_g", "protein", 1003, 203, ("protein",), round_tenth),
    _FieldSpec(
        "fat_g", "fat", 1004, 204, ("total lipid", "total fat", "fat"), round_tenth
    ),
    _FieldSpec(
        "carbs_g", "carbohydrates", 1005, 205, ("carbohydrate",), round_tenth
    ),
    _FieldSpec("fiber_g", "fiber", 1079, 291, ("fiber",), round_tenth),
    _FieldSpec("sugar_g", "sugars", 2000, 269, ("sugars",), round_tenth),
    _FieldSpec("sodium_mg", "sodium", 1093, 307, ("sodium",), round_int),
)


def normalize_fdc_nutrition(record: Mapping[str, object]) -> NormalizedNutrition:
    """Map an FDC food record to a canonical nutrient set.

    Label nutrients (per serving) take precedence over itemized food
    nutrients (per 100 g). Missing values stay ``None``; zero is kept.
    """
    label_nutrients = record.get("labelNutrients")
    food_nutrients = record.get("foodNutrients")
    values: dict[str, float | None] = {spec.attr: None for spec in _FIELDS}
    basis: Basis = "per_100g"

    if isinstance(label_nutrients, Mapping):
        basis = "per_serving"
        for spec in _FIELDS:
            raw = _label_value(label_nutrients, spec.label_key)
            values[spec.attr] = None if raw is None else spec.rounder(raw)
    elif isinstance(food_nutrients, Sequence) and food_nutrients:
        nutrients = [item for item in food_nutrients if isinstance(item, Mapping)]
        for spec in _FIELDS:
            raw = _first_hit(_extractors_for(spec), nutrients)
            values[spec.attr] = None if raw is None else spec.rounder(raw)

    return NormalizedNutrition(
        calories=values["calories"],
        protein_g=values["protein_g"],
        carbs_g=values["carbs_g"],
        fat_g=values["fat_g"],
        fiber_g=values["fiber_g"],
        sugar_g=values["sugar_g"],
        sodium_mg=values["sodium_mg"],
        completeness=_completeness(values),
        basis=basis,
    )


def default_serving_grams(record: Mapping[str, object]) -> float | None:
    """Return the gram weight of one labeled serving, if known."""
    serving_size = _to_float(record.get("servingSize"))
    unit = str(record.get("servingSizeUnit") or "").strip().lower()
    if serving_size and serving_size > 0 and unit in _GRAM_UNITS:
        return serving_size

    portions = record.get("foodPortions")
    if isinstance(portions, Sequence) and portions:
        candidates = [p for p in portions if isinstance(p, Mapping)]
        portion = next(
            (p for p in candidates if _to_float(p.get("amount")) == 1),
            candidates[0] if candidates else None,
        )
        if portion is not None:
            gram_weight = _to_float(portion.get("gramWeight"))
            if gram_weight and gram_weight > 0:
                return gram_weight
    return None


def is_foundation_food(record: Mapping[str, object]) -> bool:
    """Foundation and SR Legacy foods have no real serving, only 100 g."""
    return record.get("dataType") in _FOUNDATION_DATA_TYPES


def scale_to_serving(
    nutrition: NormalizedNutrition, serving_grams: float
) -> NormalizedNutrition:
    """Rescale a per-100 g nutrient set to one serving of ``serving_grams``."""
    if nutrition.basis == "per_serving":
        return nutrition
    factor = serving_grams / 100
    scaled: dict[str, float | None] = {}
    for spec in _FIELDS:
        value = getattr(nutrition, spec.attr)
        scaled[spec.attr] = None if value is None else spec.rounder(value * factor)
    return replace(nutrition, basis="per_serving", **scaled)


def _label_value(label_nutrients: Mapping[str, object], key: str) -> float | None:
    entry = label_nutrients.get(key)
    if isinstance(entry, Mapping):
        return _to_float(entry.get("value"))
    return None


def _extractors_for(spec: _FieldSpec) -> tuple[Extractor, ...]:
    return (
        _by_id(spec.nutrient_id),
        _by_id(spec.alternate_id),
        *(_by_name(name) for name in spec.names),
    )


def _first_hit(
    extractors: Sequence[Extractor], nutrients: Sequence[Nutrient]
) -> float | None:
    for extractor in extractors:
        value = extractor(nutrients)
        if value is not None:
            return value
    return None


def _by_id(nutrient_id: int) -> Extractor:
    """Match on the nutrient id or the legacy nutrient number."""

    def extract(nutrients: Sequence[Nutrient]) -> float | None:
        for nutrient in nutrients:
            if nutrient_id in _nutrient_ids(nutrient):
                return _nutrient_amount(nutrient)
        return None

    return extract


def _by_name(fragment: str) -> Extractor:
    """Case-insensitive substring match on the nutrient display name."""

    def extract(nutrients: Sequence[Nutrient]) -> float | None:
        for nutrient in nutrients:
            name = _nutrient_name(nutrient)
            if fragment not in name:
                continue
            if fragment == "energy" and _nutrient_unit(nutrient) == "kj":
                continue
            _logger.debug("Matched nutrient by name: %s -> %s", fragment, name)
            return _nutrient_amount(nutrient)
        return None

    return extract


def _nested(nutrient: Nutrient) -> Mapping[str, object]:
    info = nutrient.get("nutrient")
    return info if isinstance(info, Mapping) else {}


def _nutrient_ids(nutrient: Nutrient) -> set[int]:
    info = _nested(nutrient)
    candidates = (
        nutrient.get("nutrientId"),
        nutrient.get("nutrientNumber"),
        nutrient.get("number"),
        info.get("id"),
        info.get("number"),
    )
    ids: set[int] = set()
    for candidate in candidates:
        value = _to_float(candidate)
        if value is not None and value.is_integer():
            ids.add(int(value))
    return ids


def _nutrient_name(nutrient: Nutrient) -> str:
    name = nutrient.get("nutrientName") or nutrient.get("name") or _nested(
        nutrient
    ).get("name")
    return str(name or "").lower()


def _nutrient_unit(nutrient: Nutrient) -> str:
    unit = nutrient.get("unitName") or _nested(nutrient).get("unitName")
    return str(unit or "").lower()


def _nutrient_amount(nutrient: Nutrient) -> float | None:
    value = nutrient.get("value")
    if value is None:
        value = nutrient.get("amount")
    return _to_float(value)


def _completeness(values: Mapping[str, float | None]) -> Completeness:
    present = [
        values[attr] is not None
        for attr in ("calories", "protein_g", "carbs_g", "fat_g")
    ]
    if not any(present):
        return "empty"
    if all(present):
        return "complete"
    return "incomplete"


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
