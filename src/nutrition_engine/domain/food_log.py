"""Domain models for logged food entries."""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Literal
from uuid import UUID

BaseUnit = Literal["serving", "grams"]


@dataclass(frozen=True)
class FoodLogItem:
    """A logged food occurrence.

    In grams mode ``serving_grams`` is the sentinel ``1`` and ``quantity`` is
    the grams value. ``original_serving_grams`` keeps the per-serving weight
    fixed at import time so that it survives a trip through grams mode.
    """

    name: str
    quantity: float
    base_unit: BaseUnit
    serving_grams: float
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    serving_size: str
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    original_serving_grams: float | None = None
    id: UUID | None = None
    source_ref: str | None = None

    @property
    def computed_total_grams(self) -> float:
        return self.quantity * self.serving_grams


@dataclass(frozen=True)
class ServingEditResult:
    """Authoritative replacement for a food log item's numeric fields."""

    quantity: float
    serving_grams: float
    base_unit: BaseUnit
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

    def apply_to(self, item: FoodLogItem) -> FoodLogItem:
        """Return a copy of ``item`` with every edited field replaced."""
        return replace(
            item,
            quantity=self.quantity,
            base_unit=self.base_unit,
            serving_grams=self.serving_grams,
            serving_size=self.display_serving_size,
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            fiber_g=self.fiber_g,
            sugar_g=self.sugar_g,
            sodium_mg=self.sodium_mg,
            original_serving_grams=self.original_serving_grams,
        )


@dataclass(frozen=True)
class MacroTotals:
    """Summed calories and macros."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0


@dataclass(frozen=True)
class NutritionLog:
    """A day's logged items with totals."""

    log_date: date
    items: list[FoodLogItem] = field(default_factory=list)
    totals: MacroTotals = field(default_factory=MacroTotals)
