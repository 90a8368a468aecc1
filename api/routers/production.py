"""Production, ingredient consumption and cost calculation endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.config import Settings, get_settings
from api.dependencies import get_production_service
from api.middleware.auth import require_permission
from cookiecogs.models import CostBreakdown, DateRange, IngredientRequirement, IngredientUsage
from cookiecogs.services import ProductionService
from cookiecogs.services.cost_calculator import product_margins, production_cost

router = APIRouter()


class ProductionEntry(BaseModel):
    product_id: int
    new_total: int = Field(..., ge=0, description="Day's production total after this entry")
    allow_shortfall: bool = False
    day: Optional[date] = Field(None, description="YYYY-MM-DD, defaults to today")


class ProductionBatch(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    allow_shortfall: bool = False
    day: Optional[date] = Field(None, description="YYYY-MM-DD, defaults to today")


class CostRequest(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=0)
    hours: float = Field(..., ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0, description="Defaults to the configured cost per hour")
    material_cost_per_unit: Optional[float] = Field(None, ge=0, description="Defaults to the production price")
    sales_price: Optional[float] = Field(None, ge=0, description="Defaults to the product price")


def _requirement(req: IngredientRequirement) -> dict:
    return {
        **req.model_dump(),
        "sufficient": req.sufficient,
        "shortfall": round(req.shortfall, 3),
    }


def _result_response(result) -> dict:
    data = result.model_dump(exclude={"consumed", "shortfalls"})
    data["consumed"] = [_requirement(r) for r in result.consumed]
    data["shortfalls"] = [_requirement(r) for r in result.shortfalls]
    return data


@router.post("/record")
async def record_production(
    request: ProductionEntry,
    _user=Depends(require_permission("production")),
    service: ProductionService = Depends(get_production_service),
):
    """
    Set the day's production total.

    An increase deducts recipe ingredients; without allow_shortfall an
    increase the stock cannot cover is rejected with 409.
    """
    result = service.record_production(
        request.product_id,
        request.new_total,
        allow_shortfall=request.allow_shortfall,
        day=request.day,
    )
    return _result_response(result)


@router.post("/batch")
async def add_production(
    request: ProductionBatch,
    _user=Depends(require_permission("production")),
    service: ProductionService = Depends(get_production_service),
):
    result = service.add_production(
        request.product_id,
        request.quantity,
        allow_shortfall=request.allow_shortfall,
        day=request.day,
    )
    return _result_response(result)


@router.get("/availability/{product_id}")
async def check_availability(
    product_id: int,
    quantity: float = Query(..., gt=0),
    _user=Depends(require_permission("production")),
    service: ProductionService = Depends(get_production_service),
):
    requirements = service.availability(product_id, quantity)
    return {
        "product_id": product_id,
        "quantity": quantity,
        "sufficient": all(r.sufficient for r in requirements),
        "ingredients": [_requirement(r) for r in requirements],
    }


@router.get("/usage", response_model=List[IngredientUsage])
async def ingredient_usage(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    _user=Depends(require_permission("view_ingredients")),
    service: ProductionService = Depends(get_production_service),
):
    return service.ingredient_usage(DateRange(start=start, end=end))


@router.post("/cost", response_model=CostBreakdown)
async def calculate_cost(
    request: CostRequest,
    _user=Depends(require_permission("production")),
    service: ProductionService = Depends(get_production_service),
    settings: Settings = Depends(get_settings),
):
    """Per-unit cost and margin of a production run. Low margins are flagged, not rejected."""
    product = service.state.get_product(request.product_id)
    hourly_rate = request.hourly_rate
    if hourly_rate is None:
        hourly_rate = service.state.settings.cost_per_hour

    return production_cost(
        material_cost_per_unit=(
            request.material_cost_per_unit
            if request.material_cost_per_unit is not None
            else product.production_price
        ),
        hourly_rate=hourly_rate,
        quantity=request.quantity,
        hours=request.hours,
        sales_price=request.sales_price if request.sales_price is not None else product.price,
        low_margin_threshold=settings.low_margin_threshold,
    )


@router.get("/margins")
async def margins(
    _user=Depends(require_permission("view_stats")),
    service: ProductionService = Depends(get_production_service),
):
    return {"products": product_margins(service.state.products)}
