"""Process-local food log repository."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from nutrition_engine.domain.food_log import FoodLogItem
from nutrition_engine.services.food_log import FoodLogRepository


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """Keeps logged items in memory, grouped by date."""

    items: dict[UUID, FoodLogItem] = field(default_factory=dict)
    dates: dict[UUID, date] = field(default_factory=dict)

    def add_item(self, log_date: date, item: FoodLogItem) -> FoodLogItem:
        if item.id is None:
            raise ValueError("Food log items need an id before they are stored")
        self.items[item.id] = item
        self.dates[item.id] = log_date
        return item

    def get_item(self, item_id: UUID) -> FoodLogItem | None:
        return self.items.get(item_id)

    def replace_item(self, item: FoodLogItem) -> None:
        if item.id is None or item.id not in self.items:
            raise KeyError(item.id)
        self.items[item.id] = item

    def list_items(self, log_date: date) -> list[FoodLogItem]:
        return [
            item
            for item_id, item in self.items.items()
            if self.dates.get(item_id) == log_date
        ]
