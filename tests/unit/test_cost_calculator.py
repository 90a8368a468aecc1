"""Tests for the cost calculator."""

import pytest

from cookiecogs.models import Product, Recipe
from cookiecogs.services.cost_calculator import (
    labor_cost_per_unit,
    margin_percent,
    product_margins,
    production_cost,
    recipe_costs,
)


def test_labor_and_total_cost_per_unit():
    breakdown = production_cost(
        material_cost_per_unit=0.75,
        hourly_rate=60.0,
        quantity=500,
        hours=10,
        sales_price=2.50,
    )

    assert breakdown.labor_cost_per_unit == pytest.approx(1.2)
    assert breakdown.total_cost_per_unit == pytest.approx(1.95)
    assert breakdown.margin == pytest.approx(0.55)
    assert breakdown.margin_percent == pytest.approx(22.0)
    assert breakdown.total_profit == pytest.approx(275.0)


def test_low_margin_is_flagged_not_rejected():
    breakdown = production_cost(0.75, 60.0, 500, 10, 2.50)

    assert breakdown.low_margin
    assert not breakdown.negative_margin


def test_negative_margin_flag():
    breakdown = production_cost(0.75, 60.0, 100, 10, 2.50)

    assert breakdown.labor_cost_per_unit == pytest.approx(6.0)
    assert breakdown.negative_margin


def test_custom_low_margin_threshold():
    breakdown = production_cost(0.75, 60.0, 500, 10, 2.50, low_margin_threshold=20)
    assert not breakdown.low_margin


def test_zero_quantity_has_no_labor_share():
    assert labor_cost_per_unit(8, 60.0, 0) == 0.0


def test_units_per_minute():
    breakdown = production_cost(0.5, 30.0, 120, 2, 2.0)
    assert breakdown.units_per_minute == pytest.approx(1.0)


def test_margin_percent_without_price():
    assert margin_percent(0, 1.0) == 0.0


def test_recipe_costs_skip_products_without_recipe(state):
    products = [Product(id=1, name="A"), Product(id=2, name="B")]
    recipes = {1: Recipe(product_id=1, ingredients={3: 2.0}, batch_yield=50)}

    costs = recipe_costs(products, recipes, state.ingredients_by_id())

    assert len(costs) == 1
    assert costs[0].batch_cost == pytest.approx(13.0)
    assert costs[0].cost_per_unit == pytest.approx(0.26)


def test_product_margins():
    margins = product_margins([Product(id=1, name="A", price=2.50, production_price=0.75)])

    assert margins[0]["margin"] == 1.75
    assert margins[0]["margin_percent"] == 70.0
