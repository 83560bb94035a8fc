"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import date
from typing import Annotated, Any
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from nutrition_engine.api.models import (
    AssessmentResponse,
    EstimateResponse,
    FoodBatchRequest,
    FoodDetailsModel,
    FoodLogItemModel,
    ImportRequest,
    MacroInputModel,
    NormalizedNutritionModel,
    NutritionLogModel,
    QuantityEdit,
    ServingEditRequest,
    ServingEditResultModel,
    ValidationResultModel,
)
from nutrition_engine.app_logging import configure_logging
from nutrition_engine.config import parse_log_level
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.nutrition import NormalizedNutrition, NutritionAssessment
from nutrition_engine.services.energy import (
    ATWATER_FACTORS,
    classify_macros,
    estimate_missing_macro,
)
from nutrition_engine.services.normalizer import normalize_fdc_nutrition
from nutrition_engine.services.nutrition import NutritionImportError
from nutrition_engine.services.servings import (
    compute_servings_change,
    format_serving_size,
)
from nutrition_engine.services.validation import assess_nutrition

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(parse_log_level(container.settings.log_level))
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NutritionImportError)
    async def nutrition_import_error(
        request: Request, exc: NutritionImportError
    ) -> JSONResponse:
        logger.warning("Rejected FDC food %s: %s", exc.fdc_id, exc)
        return JSONResponse(
            status_code=_UNPROCESSABLE,
            content={
                "detail": str(exc),
                "reason": exc.reason,
                "missing_macros": list(exc.missing_macros),
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/constants/atwater")
    async def atwater_constants() -> dict[str, int]:
        """Energy density per gram used by every calorie estimate."""
        return dict(ATWATER_FACTORS)

    @app.post("/nutrition/estimate")
    async def estimate(macros: MacroInputModel) -> EstimateResponse:
        """Classify partial macros and estimate the missing one if possible."""
        domain_macros = macros.to_domain()
        validation = classify_macros(domain_macros)
        estimated = (
            estimate_missing_macro(domain_macros)
            if validation.recommended_action == "estimate"
            else domain_macros
        )
        return EstimateResponse(
            validation=ValidationResultModel.model_validate(validation),
            estimated=MacroInputModel(
                calories=estimated.calories,
                protein_g=estimated.protein_g,
                carbs_g=estimated.carbs_g,
                fat_g=estimated.fat_g,
            ),
        )

    @app.post("/nutrition/normalize")
    async def normalize(record: dict[str, Any]) -> AssessmentResponse:
        """Normalize a raw FDC record and report whether it can be logged."""
        normalized = normalize_fdc_nutrition(record)
        return _assessment_response(assess_nutrition(normalized), normalized)

    @app.post("/nutrition/validate")
    async def validate(nutrition: NormalizedNutritionModel) -> AssessmentResponse:
        """Validate a normalized record, rejecting unusable ones with 422."""
        normalized = nutrition.to_domain()
        assessment = assess_nutrition(normalized)
        if not assessment.accepted:
            raise HTTPException(
                status_code=_UNPROCESSABLE,
                detail={
                    "reason": assessment.rejection,
                    "missing_macros": list(assessment.validation.missing_macros),
                },
            )
        return _assessment_response(assessment, normalized)

    @app.post("/servings/convert")
    async def convert_servings(edit: ServingEditRequest) -> ServingEditResultModel:
        """Rescale a food log item to a new quantity and unit."""
        result = compute_servings_change(
            edit.item.to_domain(), edit.quantity, edit.unit
        )
        return ServingEditResultModel.model_validate(result)

    @app.get("/foods/search")
    async def search_foods(
        request: Request,
        q: str,
        limit: int = 5,
        data_type: Annotated[list[str] | None, Query()] = None,
    ) -> dict[str, object]:
        """Search FDC foods, optionally restricted to data types."""
        state_container: AppContainer = request.app.state.container
        foods = await state_container.nutrition_service.search(
            q, limit=limit, data_types=data_type
        )
        return {
            "foods": [
                {
                    "fdc_id": food.fdc_id,
                    "description": food.description,
                    "brand_owner": food.brand_owner,
                    "brand_name": food.brand_name,
                    "data_type": food.data_type,
                }
                for food in foods
            ]
        }

    @app.post("/foods/batch")
    async def get_foods_batch(
        batch: FoodBatchRequest, request: Request
    ) -> list[FoodDetailsModel]:
        """Fetch several foods with normalized nutrition in one FDC call."""
        state_container: AppContainer = request.app.state.container
        foods = await state_container.nutrition_service.get_foods(batch.fdc_ids)
        return [FoodDetailsModel.model_validate(food) for food in foods]

    @app.post("/foods/{fdc_id}/import")
    async def import_food(
        fdc_id: int, request: Request, body: ImportRequest | None = None
    ) -> FoodLogItemModel:
        """Turn an FDC food into a food log item, or reject it with 422."""
        state_container: AppContainer = request.app.state.container
        options = body or ImportRequest()
        item = await state_container.nutrition_service.import_food(
            fdc_id, quantity=options.quantity, unit=options.unit
        )
        return FoodLogItemModel.model_validate(item)

    @app.post("/log/{log_date}/items", status_code=status.HTTP_201_CREATED)
    async def add_log_item(
        log_date: date, item: FoodLogItemModel, request: Request
    ) -> FoodLogItemModel:
        """Log a validated food item for a date."""
        state_container: AppContainer = request.app.state.container
        domain_item = item.to_domain()
        if not domain_item.serving_size:
            domain_item = replace(
                domain_item, serving_size=format_serving_size(domain_item)
            )
        stored = state_container.food_log_service.add_item(log_date, domain_item)
        return FoodLogItemModel.model_validate(stored)

    @app.get("/log/{log_date}")
    async def get_log(log_date: date, request: Request) -> NutritionLogModel:
        """Return a day's items and totals."""
        state_container: AppContainer = request.app.state.container
        log = state_container.food_log_service.get_log(log_date)
        return NutritionLogModel.model_validate(log)

    @app.patch("/log/items/{item_id}")
    async def edit_log_item(
        item_id: UUID, edit: QuantityEdit, request: Request
    ) -> FoodLogItemModel:
        """Apply a quantity/unit edit to a logged item."""
        state_container: AppContainer = request.app.state.container
        updated = state_container.food_log_service.edit_item(
            item_id, edit.quantity, edit.unit
        )
        if updated is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return FoodLogItemModel.model_validate(updated)

    return app


def _assessment_response(
    assessment: NutritionAssessment, normalized: NormalizedNutrition
) -> AssessmentResponse:
    return AssessmentResponse(
        accepted=assessment.accepted,
        rejection=assessment.rejection,
        nutrition=(
            NormalizedNutritionModel.model_validate(assessment.nutrition)
            if assessment.nutrition is not None
            else None
        ),
        normalized=NormalizedNutritionModel.model_validate(normalized),
        validation=ValidationResultModel.model_validate(assessment.validation),
        expected_calories=assessment.expected_calories,
        tolerance=assessment.tolerance,
    )
