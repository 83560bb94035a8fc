"""Macro presence classification and Atwater energy-balance estimation."""

from dataclasses import replace
from types import MappingProxyType

from nutrition_engine.domain.nutrition import (
    MacroField,
    MacroInput,
    RecommendedAction,
    ValidationResult,
)
from nutrition_engine.services.rounding import round_int, round_tenth

# kcal per gram; UI previews must use this table, not their own copies.
ATWATER_FACTORS = MappingProxyType({"protein": 4, "carbs": 4, "fat": 9})

_MACRO_FIELDS: tuple[tuple[MacroField, str], ...] = (
    ("protein", "protein_g"),
    ("carbs", "carbs_g"),
    ("fat", "fat_g"),
)


def atwater_calories(protein_g: float, carbs_g: float, fat_g: float) -> int:
    """Return calories implied by macro grams, rounded to an integer."""
    return round_int(
        protein_g * ATWATER_FACTORS["protein"]
        + carbs_g * ATWATER_FACTORS["carbs"]
        + fat_g * ATWATER_FACTORS["fat"]
    )


def classify_macros(macros: MacroInput) -> ValidationResult:
    """Classify which of the four fields are present and what to do next."""
    has_calories = macros.calories is not None
    has_protein = macros.protein_g is not None
    has_carbs = macros.carbs_g is not None
    has_fat = macros.fat_g is not None

    missing: list[MacroField] = []
    if not has_calories:
        missing.append("calories")
    if not has_protein:
        missing.append("protein")
    if not has_carbs:
        missing.append("carbs")
    if not has_fat:
        missing.append("fat")

    present_macros = sum((has_protein, has_carbs, has_fat))
    total_present = present_macros + (1 if has_calories else 0)

    can_estimate_calories = not has_calories and present_macros == 3
    can_estimate_macro = has_calories and present_macros == 2
    can_estimate = can_estimate_calories or can_estimate_macro

    action: RecommendedAction
    if total_present == 0:
        action = "skip"
    elif total_present >= 4:
        action = "import"
    elif total_present >= 2 and can_estimate:
        action = "estimate"
    else:
        action = "manual"

    return ValidationResult(
        is_valid=action in {"import", "estimate"},
        has_calories=has_calories,
        has_protein=has_protein,
        has_carbs=has_carbs,
        has_fat=has_fat,
        can_estimate=can_estimate,
        missing_macros=tuple(missing),
        recommended_action=action,
    )


def estimate_missing_macro(macros: MacroInput) -> MacroInput:
    """Fill the single missing field using Atwater factors.

    Calories are estimated from all three macros; a single missing macro is
    estimated from calories minus the energy of the other two, clamped at
    zero. Any other shape is returned unchanged.
    """
    present = {
        name: getattr(macros, attr)
        for name, attr in _MACRO_FIELDS
        if getattr(macros, attr) is not None
    }

    if macros.calories is None:
        if len(present) == len(_MACRO_FIELDS):
            return replace(
                macros,
                calories=atwater_calories(
                    present["protein"], present["carbs"], present["fat"]
                ),
            )
        return macros

    if len(present) != len(_MACRO_FIELDS) - 1:
        return macros

    known_calories = sum(
        grams * ATWATER_FACTORS[name] for name, grams in present.items()
    )
    missing_name, missing_attr = next(
        (name, attr) for name, attr in _MACRO_FIELDS if name not in present
    )
    grams = round_tenth(
        (macros.calories - known_calories) / ATWATER_FACTORS[missing_name]
    )
    return replace(macros, **{missing_attr: max(0.0, grams)})
