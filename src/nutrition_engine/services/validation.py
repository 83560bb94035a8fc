"""Validation and single-field inference for normalized nutrition."""

import logging
from dataclasses import replace

from nutrition_engine.domain.nutrition import (
    MacroField,
    NormalizedNutrition,
    NutritionAssessment,
)
from nutrition_engine.services.energy import (
    atwater_calories,
    classify_macros,
    estimate_missing_macro,
)
from nutrition_engine.services.rounding import round_int

MIN_CALORIE_TOLERANCE = 20
CALORIE_TOLERANCE_RATIO = 0.10

_ESTIMATED_ATTRS: tuple[tuple[MacroField, str], ...] = (
    ("calories", "calories"),
    ("protein", "protein_g"),
    ("carbs", "carbs_g"),
    ("fat", "fat_g"),
)

_logger = logging.getLogger(__name__)


def calorie_tolerance(calories: float) -> int:
    """Allowed gap between stated and Atwater calories: max(20, 10%)."""
    return max(MIN_CALORIE_TOLERANCE, round_int(calories * CALORIE_TOLERANCE_RATIO))


def assess_nutrition(nutrition: NormalizedNutrition) -> NutritionAssessment:
    """Validate a normalized record, estimating at most one missing field."""
    macros = nutrition.macros()
    validation = classify_macros(macros)

    if nutrition.completeness == "empty" or validation.recommended_action == "skip":
        _logger.warning("Rejecting food with no nutrition data")
        return NutritionAssessment(None, validation, rejection="empty")

    if validation.recommended_action == "manual":
        _logger.warning(
            "Rejecting food too incomplete to estimate: missing=%s",
            ",".join(validation.missing_macros),
        )
        return NutritionAssessment(None, validation, rejection="insufficient")

    result = nutrition
    if validation.recommended_action == "estimate":
        estimated = estimate_missing_macro(macros)
        updates: dict[str, float] = {}
        estimated_fields: list[MacroField] = []
        for field_name, attr in _ESTIMATED_ATTRS:
            value = getattr(estimated, attr)
            if getattr(macros, attr) is None and value is not None:
                updates[attr] = value
                estimated_fields.append(field_name)
        result = replace(
            nutrition,
            used_inference=True,
            estimated_fields=tuple(estimated_fields),
            completeness="complete",
            **updates,
        )

    if (
        result.calories is None
        or result.protein_g is None
        or result.carbs_g is None
        or result.fat_g is None
    ):
        return NutritionAssessment(None, validation, rejection="insufficient")

    expected = atwater_calories(result.protein_g, result.carbs_g, result.fat_g)
    tolerance = calorie_tolerance(result.calories)
    if abs(expected - result.calories) > tolerance:
        _logger.warning(
            "Calories validation failed: computed=%s provided=%s tolerance=%s",
            expected,
            result.calories,
            tolerance,
        )
        return NutritionAssessment(
            None,
            validation,
            rejection="inconsistent",
            expected_calories=expected,
            tolerance=tolerance,
        )

    return NutritionAssessment(
        result, validation, expected_calories=expected, tolerance=tolerance
    )


def validate_and_infer_macros(
    nutrition: NormalizedNutrition,
) -> NormalizedNutrition | None:
    """Return the accepted record, or ``None`` when it cannot be logged."""
    return assess_nutrition(nutrition).nutrition
