"""Pydantic request and response models for the HTTP API."""

from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from nutrition_engine.domain.food_log import FoodLogItem
from nutrition_engine.domain.nutrition import (
    Basis,
    Completeness,
    MacroField,
    MacroInput,
    NormalizedNutrition,
    RecommendedAction,
    RejectionReason,
)

Unit = Literal["serving", "grams"]


class MacroInputModel(BaseModel):
    """Partial macros; omitted or null fields are absent."""

    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None

    def to_domain(self) -> MacroInput:
        return MacroInput(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


class ValidationResultModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    has_calories: bool
    has_protein: bool
    has_carbs: bool
    has_fat: bool
    can_estimate: bool
    missing_macros: list[MacroField]
    recommended_action: RecommendedAction


class EstimateResponse(BaseModel):
    validation: ValidationResultModel
    estimated: MacroInputModel


class NormalizedNutritionModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    completeness: Completeness
    basis: Basis
    used_inference: bool = False
    estimated_fields: list[MacroField] = Field(default_factory=list)

    def to_domain(self) -> NormalizedNutrition:
        return NormalizedNutrition(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            fiber_g=self.fiber_g,
            sugar_g=self.sugar_g,
            sodium_mg=self.sodium_mg,
            completeness=self.completeness,
            basis=self.basis,
            used_inference=self.used_inference,
            estimated_fields=tuple(self.estimated_fields),
        )


class AssessmentResponse(BaseModel):
    accepted: bool
    rejection: RejectionReason | None = None
    nutrition: NormalizedNutritionModel | None = None
    normalized: NormalizedNutritionModel | None = None
    validation: ValidationResultModel
    expected_calories: int | None = None
    tolerance: int | None = None


class FoodLogItemModel(BaseModel):
    """Food log item as sent and returned over HTTP."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    name: str
    quantity: float
    base_unit: Unit
    serving_grams: float = Field(gt=0)
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    serving_size: str = ""
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    original_serving_grams: float | None = None
    source_ref: str | None = None
    computed_total_grams: float | None = None

    def to_domain(self) -> FoodLogItem:
        return FoodLogItem(
            id=self.id,
            name=self.name,
            quantity=self.quantity,
            base_unit=self.base_unit,
            serving_grams=self.serving_grams,
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            serving_size=self.serving_size,
            fiber_g=self.fiber_g,
            sugar_g=self.sugar_g,
            sodium_mg=self.sodium_mg,
            original_serving_grams=self.original_serving_grams,
            source_ref=self.source_ref,
        )


class ServingEditRequest(BaseModel):
    item: FoodLogItemModel
    quantity: float
    unit: Unit


class QuantityEdit(BaseModel):
    quantity: float
    unit: Unit


class ServingEditResultModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    quantity: float
    serving_grams: float
    base_unit: Unit
    display_serving_size: str
    total_grams: float
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: int | None = None
    original_serving_grams: float | None = None


class ImportRequest(BaseModel):
    quantity: float = 1.0
    unit: Unit = "serving"


class MacroTotalsModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


class NutritionLogModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    log_date: date
    items: list[FoodLogItemModel]
    totals: MacroTotalsModel


class FoodSummaryModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fdc_id: int
    description: str
    brand_owner: str | None = None
    brand_name: str | None = None
    data_type: str | None = None


class FoodDetailsModel(BaseModel):
    """A fetched food with normalized, not yet validated, nutrition."""

    model_config = ConfigDict(from_attributes=True)

    summary: FoodSummaryModel
    nutrition: NormalizedNutritionModel
    serving_size_g: float | None = None


class FoodBatchRequest(BaseModel):
    fdc_ids: list[int] = Field(min_length=1, max_length=20)
