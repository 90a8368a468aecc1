"""
Cost Calculator

Per-unit production cost, labor share and margin. Pure functions of their
inputs; nothing here reads or writes state.
"""

import logging
from typing import Dict, List

from cookiecogs.config.constants import LOW_MARGIN_PERCENT
from cookiecogs.models import CostBreakdown, Ingredient, Product, Recipe, RecipeCost

logger = logging.getLogger(__name__)


def labor_cost_per_unit(hours: float, hourly_rate: float, quantity: int) -> float:
    """Labor cost carried by each unit. Zero when nothing was produced."""
    if quantity <= 0:
        return 0.0
    total_minutes = hours * 60
    cost_per_minute = hourly_rate / 60
    return (total_minutes * cost_per_minute) / quantity


def margin_percent(sales_price: float, cost_per_unit: float) -> float:
    if sales_price <= 0:
        return 0.0
    return (sales_price - cost_per_unit) / sales_price * 100


def production_cost(
    material_cost_per_unit: float,
    hourly_rate: float,
    quantity: int,
    hours: float,
    sales_price: float,
    low_margin_threshold: float = LOW_MARGIN_PERCENT,
) -> CostBreakdown:
    """
    Cost and margin of one production run.

    Args:
        material_cost_per_unit: Product's production price
        hourly_rate: Labor cost per hour
        quantity: Units produced
        hours: Hours worked
        sales_price: Sales price per unit
        low_margin_threshold: Margin percentage below which low_margin is set

    Returns:
        CostBreakdown; negative and low margins are flagged, never rejected
    """
    labor = labor_cost_per_unit(hours, hourly_rate, quantity)
    total_per_unit = material_cost_per_unit + labor
    margin = sales_price - total_per_unit
    pct = margin_percent(sales_price, total_per_unit)
    minutes = hours * 60

    return CostBreakdown(
        quantity=quantity,
        hours=hours,
        material_cost_per_unit=material_cost_per_unit,
        labor_cost_per_unit=labor,
        total_cost_per_unit=total_per_unit,
        sales_price=sales_price,
        margin=margin,
        margin_percent=pct,
        units_per_minute=quantity / minutes if minutes > 0 else 0.0,
        total_production_cost=quantity * total_per_unit,
        total_revenue=quantity * sales_price,
        total_profit=quantity * margin,
        negative_margin=margin <= 0,
        low_margin=pct < low_margin_threshold,
    )


# =============================================================================
# Recipe costs
# =============================================================================

def batch_cost(recipe: Recipe, ingredients: Dict[int, Ingredient]) -> float:
    """Cost of one batch at current ingredient prices."""
    total = 0.0
    for ing_id, qty in recipe.ingredients.items():
        ingredient = ingredients.get(ing_id)
        if ingredient is None:
            logger.debug(f"Recipe {recipe.product_id} references missing ingredient {ing_id}")
            continue
        total += qty * ingredient.cost_per_unit
    return total


def cost_per_unit(recipe: Recipe, ingredients: Dict[int, Ingredient]) -> float:
    if recipe.batch_yield <= 0:
        return 0.0
    return batch_cost(recipe, ingredients) / recipe.batch_yield


def recipe_costs(
    products: List[Product],
    recipes: Dict[int, Recipe],
    ingredients: Dict[int, Ingredient],
) -> List[RecipeCost]:
    """Batch and unit cost for every product that has a recipe."""
    result = []
    for product in products:
        recipe = recipes.get(product.id)
        if recipe is None:
            continue
        result.append(RecipeCost(
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            batch_yield=recipe.batch_yield,
            batch_cost=round(batch_cost(recipe, ingredients), 4),
            cost_per_unit=round(cost_per_unit(recipe, ingredients), 4),
            notes=recipe.notes,
        ))
    return result


def product_margins(products: List[Product]) -> List[Dict]:
    """Sales price minus production price for each product."""
    return [
        {
            "product_id": p.id,
            "name": p.name,
            "price": p.price,
            "production_price": p.production_price,
            "margin": round(p.price - p.production_price, 2),
            "margin_percent": round(margin_percent(p.price, p.production_price), 1),
        }
        for p in products
    ]
