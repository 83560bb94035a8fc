"""Tests for the food log service."""

from datetime import date
from uuid import uuid4

import pytest

from nutrition_engine.adapters.memory_food_log_repository import (
    InMemoryFoodLogRepository,
)
from nutrition_engine.services.food_log import FoodLogService
from tests.conftest import make_item

LOG_DATE = date(2024, 5, 1)


def test_add_item_assigns_id(food_log_repository: InMemoryFoodLogRepository) -> None:
    service = FoodLogService(food_log_repository)

    stored = service.add_item(LOG_DATE, make_item("serving", 1, 40))

    assert stored.id is not None
    assert food_log_repository.get_item(stored.id) == stored


def test_edit_item_replaces_numeric_fields(
    food_log_repository: InMemoryFoodLogRepository,
) -> None:
    service = FoodLogService(food_log_repository)
    stored = service.add_item(LOG_DATE, make_item("serving", 1, 40))
    assert stored.id is not None

    updated = service.edit_item(stored.id, 60, "grams")

    assert updated is not None
    assert updated.id == stored.id
    assert updated.base_unit == "grams"
    assert updated.quantity == 60
    assert updated.serving_grams == 1
    assert updated.original_serving_grams == 40
    assert updated.calories == 120
    assert updated.serving_size == "60g"
    assert food_log_repository.get_item(stored.id) == updated


def test_preview_does_not_store(
    food_log_repository: InMemoryFoodLogRepository,
) -> None:
    service = FoodLogService(food_log_repository)
    stored = service.add_item(LOG_DATE, make_item("serving", 1, 40))
    assert stored.id is not None

    preview = service.preview_edit(stored.id, 2, "serving")

    assert preview is not None
    assert preview.calories == 160
    assert food_log_repository.get_item(stored.id) == stored


def test_unknown_item_returns_none(
    food_log_repository: InMemoryFoodLogRepository,
) -> None:
    service = FoodLogService(food_log_repository)

    assert service.edit_item(uuid4(), 1, "serving") is None
    assert service.preview_edit(uuid4(), 1, "serving") is None


def test_get_log_sums_items_for_date(
    food_log_repository: InMemoryFoodLogRepository,
) -> None:
    service = FoodLogService(food_log_repository)
    service.add_item(LOG_DATE, make_item("serving", 1, 40))
    service.add_item(LOG_DATE, make_item("grams", 60))
    service.add_item(date(2024, 5, 2), make_item("grams", 500))

    log = service.get_log(LOG_DATE)

    assert len(log.items) == 2
    assert log.totals.calories == 200
    assert log.totals.protein_g == pytest.approx(20)
    assert log.totals.fat_g == pytest.approx(10)
