"""Recipe endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.dependencies import get_catalog_service
from api.middleware.auth import require_permission
from cookiecogs.models import Recipe, RecipeCost
from cookiecogs.services import CatalogService
from cookiecogs.services.cost_calculator import batch_cost, cost_per_unit, recipe_costs

router = APIRouter()


class RecipeIngredientUpdate(BaseModel):
    quantity: float = Field(..., ge=0, description="Amount per batch; 0 removes the ingredient")


class RecipeYieldUpdate(BaseModel):
    batch_yield: int = Field(..., gt=0)


class RecipeNotesUpdate(BaseModel):
    notes: str = ""


def _recipe_response(recipe: Recipe, service: CatalogService) -> dict:
    ingredients = service.state.ingredients_by_id()
    return {
        **recipe.model_dump(),
        "lines": [
            {
                "ingredient_id": ing_id,
                "name": ingredients[ing_id].name,
                "unit": ingredients[ing_id].unit,
                "quantity": qty,
                "cost": round(qty * ingredients[ing_id].cost_per_unit, 4),
            }
            for ing_id, qty in sorted(recipe.ingredients.items())
            if ing_id in ingredients
        ],
        "batch_cost": round(batch_cost(recipe, ingredients), 4),
        "cost_per_unit": round(cost_per_unit(recipe, ingredients), 4),
    }


@router.get("", response_model=List[RecipeCost])
async def list_recipe_costs(
    _user=Depends(require_permission("view_recipes")),
    service: CatalogService = Depends(get_catalog_service),
):
    """Batch and unit cost for every product."""
    state = service.state
    return recipe_costs(state.products, state.recipes, state.ingredients_by_id())


@router.get("/{product_id}")
async def get_recipe(
    product_id: int,
    _user=Depends(require_permission("view_recipes")),
    service: CatalogService = Depends(get_catalog_service),
):
    return _recipe_response(service.get_recipe(product_id), service)


@router.put("/{product_id}/ingredients/{ingredient_id}")
async def set_recipe_ingredient(
    product_id: int,
    ingredient_id: int,
    request: RecipeIngredientUpdate,
    _user=Depends(require_permission("edit_recipes")),
    service: CatalogService = Depends(get_catalog_service),
):
    recipe = service.set_recipe_ingredient(product_id, ingredient_id, request.quantity)
    return _recipe_response(recipe, service)


@router.put("/{product_id}/yield")
async def set_recipe_yield(
    product_id: int,
    request: RecipeYieldUpdate,
    _user=Depends(require_permission("edit_recipes")),
    service: CatalogService = Depends(get_catalog_service),
):
    return _recipe_response(service.set_recipe_yield(product_id, request.batch_yield), service)


@router.put("/{product_id}/notes")
async def set_recipe_notes(
    product_id: int,
    request: RecipeNotesUpdate,
    _user=Depends(require_permission("edit_recipes")),
    service: CatalogService = Depends(get_catalog_service),
):
    return _recipe_response(service.set_recipe_notes(product_id, request.notes), service)
