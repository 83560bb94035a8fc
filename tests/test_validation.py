"""Tests for validation and single-field inference."""

import pytest

from nutrition_engine.domain.nutrition import NormalizedNutrition
from nutrition_engine.services.validation import (
    assess_nutrition,
    calorie_tolerance,
    validate_and_infer_macros,
)


def _nutrition(
    calories: float | None,
    protein_g: float | None,
    carbs_g: float | None,
    fat_g: float | None,
) -> NormalizedNutrition:
    present = [v is not None for v in (calories, protein_g, carbs_g, fat_g)]
    if not any(present):
        completeness = "empty"
    elif all(present):
        completeness = "complete"
    else:
        completeness = "incomplete"
    return NormalizedNutrition(
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        fiber_g=None,
        sugar_g=None,
        sodium_mg=None,
        completeness=completeness,
        basis="per_serving",
    )


@pytest.mark.parametrize(
    ("calories", "expected"),
    [(0, 20), (150, 20), (200, 20), (250, 25), (500, 50), (1234, 123)],
)
def test_calorie_tolerance(calories: float, expected: int) -> None:
    assert calorie_tolerance(calories) == expected


def test_complete_record_is_returned_unchanged() -> None:
    nutrition = _nutrition(290, 20, 30, 10)

    assert validate_and_infer_macros(nutrition) is nutrition


def test_all_zero_record_is_accepted() -> None:
    nutrition = _nutrition(0, 0, 0, 0)

    assessment = assess_nutrition(nutrition)

    assert assessment.accepted
    assert assessment.validation.recommended_action == "import"
    assert assessment.nutrition == nutrition


def test_inconsistent_record_beyond_tolerance_is_rejected() -> None:
    # 4*45 + 4*50 + 9*20 = 560, diff 60 > max(20, 50)
    assessment = assess_nutrition(_nutrition(500, 45, 50, 20))

    assert assessment.nutrition is None
    assert assessment.rejection == "inconsistent"
    assert assessment.expected_calories == 560
    assert assessment.tolerance == 50


def test_record_within_tolerance_is_accepted() -> None:
    # 4*40 + 4*50 + 9*20 = 540, diff 40 <= 50
    assert validate_and_infer_macros(_nutrition(500, 40, 50, 20)) is not None


def test_difference_equal_to_tolerance_is_accepted() -> None:
    # 4*42.5 + 4*50 + 9*20 = 550, diff exactly 50
    assert validate_and_infer_macros(_nutrition(500, 42.5, 50, 20)) is not None


def test_missing_calories_are_estimated() -> None:
    result = validate_and_infer_macros(_nutrition(None, 20, 30, 10))

    assert result is not None
    assert result.calories == 290
    assert result.estimated_fields == ("calories",)
    assert result.used_inference is True
    assert result.completeness == "complete"


def test_missing_protein_is_estimated() -> None:
    result = validate_and_infer_macros(_nutrition(500, None, 30, 10))

    assert result is not None
    assert result.protein_g == 72.5
    assert result.carbs_g == 30
    assert result.estimated_fields == ("protein",)


def test_clamped_estimate_that_disagrees_is_rejected() -> None:
    assessment = assess_nutrition(_nutrition(100, 20, 20, None))

    assert assessment.rejection == "inconsistent"
    assert assessment.expected_calories == 160


def test_empty_record_is_rejected() -> None:
    assessment = assess_nutrition(_nutrition(None, None, None, None))

    assert assessment.rejection == "empty"
    assert assessment.validation.recommended_action == "skip"


def test_under_determined_record_lists_missing_fields() -> None:
    assessment = assess_nutrition(_nutrition(120, 5, None, None))

    assert assessment.rejection == "insufficient"
    assert assessment.validation.missing_macros == ("carbs", "fat")
    assert validate_and_infer_macros(_nutrition(120, 5, None, None)) is None


def test_missing_calories_with_missing_macro_is_rejected() -> None:
    assessment = assess_nutrition(_nutrition(None, 10, 10, None))

    assert assessment.rejection == "insufficient"
    assert assessment.validation.missing_macros == ("calories", "fat")
