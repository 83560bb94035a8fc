"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from nutrition_engine.adapters.fdc_client import FdcClient
from nutrition_engine.adapters.memory_food_log_repository import (
    InMemoryFoodLogRepository,
)
from nutrition_engine.config import Settings
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.food_log import BaseUnit, FoodLogItem
from nutrition_engine.services.cache import InMemoryCache
from nutrition_engine.services.food_log import FoodLogService
from nutrition_engine.services.nutrition import NutritionService

BRANDED_OATS_ID = 2001
FOUNDATION_CHICKEN_ID = 171077
BRANDED_PER_100G_ID = 2002
INCONSISTENT_ID = 2003
MISSING_PROTEIN_ID = 2004
EMPTY_ID = 2005
CALORIES_ONLY_ID = 2006


def branded_oats_payload() -> dict[str, object]:
    return {
        "fdcId": BRANDED_OATS_ID,
        "description": "Rolled oats",
        "brandOwner": "Acme Mills",
        "brandName": "Acme",
        "dataType": "Branded",
        "servingSize": 40,
        "servingSizeUnit": "g",
        "labelNutrients": {
            "calories": {"value": 150},
            "protein": {"value": 5},
            "fat": {"value": 2.5},
            "carbohydrates": {"value": 27},
            "fiber": {"value": 4},
            "sugars": {"value": 1},
            "sodium": {"value": 0},
        },
    }


def foundation_chicken_payload() -> dict[str, object]:
    return {
        "fdcId": FOUNDATION_CHICKEN_ID,
        "description": "Chicken, broilers or fryers, breast, meat only, raw",
        "dataType": "SR Legacy",
        "foodNutrients": [
            {
                "nutrient": {
                    "id": 1008,
                    "number": "208",
                    "name": "Energy",
                    "unitName": "kcal",
                },
                "amount": 120,
            },
            {
                "nutrient": {
                    "id": 1003,
                    "number": "203",
                    "name": "Protein",
                    "unitName": "g",
                },
                "amount": 22.5,
            },
            {
                "nutrient": {
                    "id": 1004,
                    "number": "204",
                    "name": "Total lipid (fat)",
                    "unitName": "g",
                },
                "amount": 2.62,
            },
            {
                "nutrient": {
                    "id": 1005,
                    "number": "205",
                    "name": "Carbohydrate, by difference",
                    "unitName": "g",
                },
                "amount": 0,
            },
            {
                "nutrient": {
                    "id": 1093,
                    "number": "307",
                    "name": "Sodium, Na",
                    "unitName": "mg",
                },
                "amount": 45,
            },
        ],
        "foodPortions": [{"amount": 1, "gramWeight": 118, "modifier": "breast"}],
    }


def branded_per_100g_payload() -> dict[str, object]:
    return {
        "fdcId": BRANDED_PER_100G_ID,
        "description": "Granola bites",
        "dataType": "Branded",
        "servingSize": 30,
        "servingSizeUnit": "g",
        "foodNutrients": [
            {"nutrientId": 1008, "nutrientName": "Energy", "value": 370},
            {"nutrientId": 1003, "nutrientName": "Protein", "value": 10},
            {"nutrientId": 1004, "nutrientName": "Total lipid (fat)", "value": 10},
            {
                "nutrientId": 1005,
                "nutrientName": "Carbohydrate, by difference",
                "value": 60,
            },
        ],
    }


def label_payload(fdc_id: int, **values: float) -> dict[str, object]:
    return {
        "fdcId": fdc_id,
        "description": f"Label food {fdc_id}",
        "dataType": "Branded",
        "servingSize": 100,
        "servingSizeUnit": "g",
        "labelNutrients": {key: {"value": value} for key, value in values.items()},
    }


def default_food_payloads() -> dict[int, dict[str, object]]:
    return {
        BRANDED_OATS_ID: branded_oats_payload(),
        FOUNDATION_CHICKEN_ID: foundation_chicken_payload(),
        BRANDED_PER_100G_ID: branded_per_100g_payload(),
        INCONSISTENT_ID: label_payload(
            INCONSISTENT_ID, calories=500, protein=10, carbohydrates=10, fat=10
        ),
        MISSING_PROTEIN_ID: label_payload(
            MISSING_PROTEIN_ID, calories=500, carbohydrates=30, fat=10
        ),
        EMPTY_ID: label_payload(EMPTY_ID, sodium=10),
        CALORIES_ONLY_ID: label_payload(CALORIES_ONLY_ID, calories=90),
    }


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": BRANDED_OATS_ID,
                    "description": "Rolled oats",
                    "brandOwner": "Acme Mills",
                    "brandName": "Acme",
                    "dataType": "Branded",
                }
            ]
        }
    )
    food_payloads: dict[int, dict[str, object]] = field(
        default_factory=default_food_payloads
    )
    search_calls: int = 0
    food_calls: int = 0
    bulk_calls: int = 0
    last_data_types: Sequence[str] | None = None

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: Sequence[str] | None = None,
    ) -> dict[str, object]:
        self.search_calls += 1
        self.last_data_types = data_types
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payloads[fdc_id]

    async def get_foods(self, fdc_ids: Sequence[int]) -> list[dict[str, object]]:
        self.bulk_calls += 1
        return [
            self.food_payloads[fdc_id]
            for fdc_id in fdc_ids
            if fdc_id in self.food_payloads
        ]


def make_item(  # noqa: PLR0913
    mode: BaseUnit,
    quantity: float,
    serving_grams: float = 40,
    *,
    calories_per_gram: float = 2.0,
    protein_per_gram: float = 0.2,
    carbs_per_gram: float = 0.25,
    fat_per_gram: float = 0.1,
    original_serving_grams: float | None = None,
) -> FoodLogItem:
    """Build an item whose macros are exact multiples of its total grams."""
    unit_grams = 1.0 if mode == "grams" else serving_grams
    total = quantity * unit_grams
    if mode == "grams":
        serving_size = f"{round(quantity)}g"
    else:
        serving_size = f"{quantity:g} serving{'' if quantity == 1 else 's'}"
    return FoodLogItem(
        name="Test Food",
        quantity=quantity,
        base_unit=mode,
        serving_grams=unit_grams,
        calories=total * calories_per_gram,
        protein_g=total * protein_per_gram,
        carbs_g=total * carbs_per_gram,
        fat_g=total * fat_per_gram,
        serving_size=serving_size,
        original_serving_grams=original_serving_grams,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(fdc_api_key="fdc-key")


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def nutrition_service(fdc_client: FakeFdcClient) -> NutritionService:
    return NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def container(
    settings: Settings,
    nutrition_service: NutritionService,
    food_log_repository: InMemoryFoodLogRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        food_log_service=FoodLogService(food_log_repository),
        close_resources=close_resources,
    )
