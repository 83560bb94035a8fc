"""Nutrition domain models."""

from dataclasses import dataclass
from typing import Literal

Basis = Literal["per_serving", "per_100g"]
Completeness = Literal["complete", "incomplete", "empty"]
RecommendedAction = Literal["import", "estimate", "manual", "skip"]
MacroField = Literal["calories", "protein", "carbs", "fat"]
RejectionReason = Literal["empty", "insufficient", "inconsistent"]


@dataclass(frozen=True)
class MacroInput:
    """Calories and macros where ``None`` means absent and zero is a value."""

    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Presence classification of a partial macro set."""

    is_valid: bool
    has_calories: bool
    has_protein: bool
    has_carbs: bool
    has_fat: bool
    can_estimate: bool
    missing_macros: tuple[MacroField, ...]
    recommended_action: RecommendedAction


@dataclass(frozen=True)
class NormalizedNutrition:
    """Canonical nutrient set extracted from an external record."""

    calories: float | None
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    fiber_g: float | None
    sugar_g: float | None
    sodium_mg: float | None
    completeness: Completeness
    basis: Basis
    used_inference: bool = False
    estimated_fields: tuple[MacroField, ...] = ()

    def macros(self) -> MacroInput:
        """Return the four required fields as a macro input."""
        return MacroInput(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


@dataclass(frozen=True)
class NutritionAssessment:
    """Outcome of validating a normalized record.

    ``nutrition`` is ``None`` whenever ``rejection`` is set.
    """

    nutrition: NormalizedNutrition | None
    validation: ValidationResult
    rejection: RejectionReason | None = None
    expected_calories: int | None = None
    tolerance: int | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


@dataclass(frozen=True)
class FoodSummary:
    """Summary information about a food from FDC."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None


@dataclass(frozen=True)
class FoodDetails:
    """A fetched food with its normalized, not yet validated, nutrition."""

    summary: FoodSummary
    nutrition: NormalizedNutrition
    serving_size_g: float | None
