"""Ingredient stock endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import get_catalog_service
from api.middleware.auth import require_permission
from cookiecogs.models import Ingredient, ShoppingList
from cookiecogs.services import CatalogService

router = APIRouter()


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1)
    min_stock: float = Field(default=1.0, ge=0)
    cost_per_unit: float = Field(default=0.0, ge=0)
    supplier: str = ""


class IngredientUpdate(BaseModel):
    name: Optional[str] = None
    amount: Optional[float] = None
    unit: Optional[str] = None
    min_stock: Optional[float] = Field(default=None, ge=0)
    cost_per_unit: Optional[float] = Field(default=None, ge=0)
    supplier: Optional[str] = None


class AmountAdjustment(BaseModel):
    delta: float


def _ingredient_response(ingredient: Ingredient, service: CatalogService) -> dict:
    return {
        **ingredient.model_dump(),
        "stock_value": round(ingredient.stock_value, 2),
        "status": service.ingredient_status(ingredient).value,
    }


@router.get("")
async def list_ingredients(
    search: Optional[str] = Query(None, description="Name or supplier contains"),
    status: str = Query("all", description="all, low or critical"),
    _user=Depends(require_permission("view_ingredients")),
    service: CatalogService = Depends(get_catalog_service),
):
    ingredients = service.list_ingredients(search=search, status=status)
    return {
        "ingredients": [_ingredient_response(i, service) for i in ingredients],
        "overview": service.ingredient_overview(),
    }


@router.get("/shopping-list", response_model=ShoppingList)
async def shopping_list(
    _user=Depends(require_permission("view_shopping_list")),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.shopping_list()


@router.get("/{ingredient_id}")
async def get_ingredient(
    ingredient_id: int,
    _user=Depends(require_permission("view_ingredients")),
    service: CatalogService = Depends(get_catalog_service),
):
    return _ingredient_response(service.get_ingredient(ingredient_id), service)


@router.post("", status_code=201)
async def create_ingredient(
    request: IngredientCreate,
    _user=Depends(require_permission("add_ingredients")),
    service: CatalogService = Depends(get_catalog_service),
):
    ingredient = service.add_ingredient(**request.model_dump())
    return _ingredient_response(ingredient, service)


@router.patch("/{ingredient_id}")
async def update_ingredient(
    ingredient_id: int,
    request: IngredientUpdate,
    _user=Depends(require_permission("edit_ingredients")),
    service: CatalogService = Depends(get_catalog_service),
):
    ingredient = service.update_ingredient(ingredient_id, **request.model_dump(exclude_unset=True))
    return _ingredient_response(ingredient, service)


@router.post("/{ingredient_id}/adjust")
async def adjust_ingredient(
    ingredient_id: int,
    request: AmountAdjustment,
    _user=Depends(require_permission("edit_ingredients")),
    service: CatalogService = Depends(get_catalog_service),
):
    """Add to (or remove from) the amount on hand; never below zero."""
    ingredient = service.adjust_ingredient(ingredient_id, request.delta)
    return _ingredient_response(ingredient, service)


@router.delete("/{ingredient_id}")
async def delete_ingredient(
    ingredient_id: int,
    _user=Depends(require_permission("delete_ingredients")),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_ingredient(ingredient_id)
    return {"deleted": ingredient_id}
