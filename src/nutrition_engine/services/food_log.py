"""Food log service applying quantity and unit edits."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID, uuid4

from nutrition_engine.domain.food_log import (
    BaseUnit,
    FoodLogItem,
    MacroTotals,
    NutritionLog,
    ServingEditResult,
)
from nutrition_engine.services.servings import compute_servings_change

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for logged food items."""

    def add_item(self, log_date: date, item: FoodLogItem) -> FoodLogItem:
        """Store a new item and return it."""

    def get_item(self, item_id: UUID) -> FoodLogItem | None:
        """Return an item by id, if present."""

    def replace_item(self, item: FoodLogItem) -> None:
        """Replace a stored item with the given one."""

    def list_items(self, log_date: date) -> list[FoodLogItem]:
        """Return items logged on a date."""


@dataclass
class FoodLogService:
    """Application service for logged food items."""

    repository: FoodLogRepository

    def add_item(self, log_date: date, item: FoodLogItem) -> FoodLogItem:
        """Log an item, assigning an id when it has none."""
        if item.id is None:
            item = replace(item, id=uuid4())
        return self.repository.add_item(log_date, item)

    def preview_edit(
        self, item_id: UUID, quantity: float, unit: BaseUnit
    ) -> ServingEditResult | None:
        """Return the edit result without storing it."""
        item = self.repository.get_item(item_id)
        if item is None:
            return None
        return compute_servings_change(item, quantity, unit)

    def edit_item(
        self, item_id: UUID, quantity: float, unit: BaseUnit
    ) -> FoodLogItem | None:
        """Apply a quantity/unit edit and replace the stored item whole."""
        item = self.repository.get_item(item_id)
        if item is None:
            return None
        result = compute_servings_change(item, quantity, unit)
        updated = result.apply_to(item)
        self.repository.replace_item(updated)
        _logger.info(
            "Edited food log item %s: %s -> %s",
            item_id,
            item.serving_size,
            updated.serving_size,
        )
        return updated

    def get_log(self, log_date: date) -> NutritionLog:
        """Return a day's items with summed totals."""
        items = self.repository.list_items(log_date)
        return NutritionLog(log_date=log_date, items=items, totals=sum_totals(items))


def sum_totals(items: list[FoodLogItem]) -> MacroTotals:
    total = MacroTotals()
    for item in items:
        total = MacroTotals(
            calories=total.calories + item.calories,
            protein_g=total.protein_g + item.protein_g,
            carbs_g=total.carbs_g + item.carbs_g,
            fat_g=total.fat_g + item.fat_g,
        )
    return total
