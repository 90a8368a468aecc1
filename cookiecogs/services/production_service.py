"""
Production Service - recipe-based ingredient consumption

Callers pass the new production total for the day; the delta against the
stored total drives ingredient deduction and the prepared counter.
"""

import logging
from typing import Dict, List, Optional

from cookiecogs.models import (
    DateRange,
    Ingredient,
    IngredientRequirement,
    IngredientUsage,
    ProductionResult,
    Recipe,
)
from cookiecogs.models.common import today_iso
from cookiecogs.services.errors import InsufficientStockError, ValidationError
from cookiecogs.services.state import COOKIES, INGREDIENTS, AppState, resolve_day

logger = logging.getLogger(__name__)


def check_availability(
    recipe: Optional[Recipe],
    ingredients: Dict[int, Ingredient],
    quantity: float,
) -> List[IngredientRequirement]:
    """
    Required vs. available amount per recipe ingredient.

    Recipe entries pointing at unknown ingredients are ignored.
    """
    if recipe is None or quantity <= 0:
        return []

    requirements = []
    for ing_id, required in recipe.scale(quantity).items():
        ingredient = ingredients.get(ing_id)
        if ingredient is None:
            continue
        requirements.append(IngredientRequirement(
            ingredient_id=ing_id,
            name=ingredient.name,
            unit=ingredient.unit,
            required=required,
            available=ingredient.amount,
        ))
    return requirements


class ProductionService:
    """Records production and consumes ingredients."""

    def __init__(self, state: AppState):
        self.state = state

    def availability(self, product_id: int, quantity: float) -> List[IngredientRequirement]:
        self.state.get_product(product_id)
        recipe = self.state.recipes.get(product_id)
        return check_availability(recipe, self.state.ingredients_by_id(), quantity)

    def record_production(
        self,
        product_id: int,
        new_total: int,
        allow_shortfall: bool = False,
        day: Optional[str] = None,
    ) -> ProductionResult:
        """
        Set the day's production total.

        Ingredients are deducted only for an increase. An increase the
        stock cannot cover raises InsufficientStockError before anything
        changes, unless allow_shortfall is set, in which case amounts
        clamp at zero and the shortfall is logged.
        """
        if new_total < 0:
            raise ValidationError("Production total cannot be negative")
        day = resolve_day(day)

        with self.state.lock:
            product = self.state.get_product(product_id)
            previous = product.peek_record(day).produziert
            delta = new_total - previous

            consumed: List[IngredientRequirement] = []
            if delta > 0:
                recipe = self.state.recipes.get(product_id)
                consumed = check_availability(recipe, self.state.ingredients_by_id(), delta)

            shortfalls = [r for r in consumed if not r.sufficient]
            if shortfalls and not allow_shortfall:
                raise InsufficientStockError(shortfalls)

            keys = [COOKIES]
            if consumed:
                stamp = today_iso()
                ingredients = self.state.ingredients_by_id()
                for req in consumed:
                    ingredient = ingredients[req.ingredient_id]
                    ingredient.amount = ingredient.amount - req.required
                    ingredient.last_updated = stamp
                keys.append(INGREDIENTS)

            for req in shortfalls:
                logger.warning(
                    f"Production of {product.name} short on {req.name}: "
                    f"needed {req.required:.3f} {req.unit}, had {req.available:.3f}"
                )

            product.prepared = product.prepared + delta
            record = product.record_for(day)
            record.produziert = new_total
            record.new = new_total

            logger.info(f"Production {product.name} on {day}: {previous} -> {new_total}")
            self.state.commit(*keys)

            return ProductionResult(
                product_id=product_id,
                day=day,
                previous_total=previous,
                new_total=new_total,
                delta=delta,
                prepared=product.prepared,
                consumed=consumed,
                shortfalls=shortfalls,
            )

    def add_production(
        self,
        product_id: int,
        quantity: int,
        allow_shortfall: bool = False,
        day: Optional[str] = None,
    ) -> ProductionResult:
        """Add a freshly produced batch on top of the day's total."""
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        day = resolve_day(day)
        with self.state.lock:
            current = self.state.get_product(product_id).peek_record(day).produziert
            return self.record_production(product_id, current + quantity, allow_shortfall, day)

    def ingredient_usage(self, period: Optional[DateRange] = None) -> List[IngredientUsage]:
        """Ingredients consumed by recorded production within a period."""
        period = period or DateRange()
        ingredients = self.state.ingredients_by_id()
        used: Dict[int, float] = {}

        for product in self.state.products:
            produced = sum(
                r.produziert for day, r in product.history.items() if period.contains(day)
            )
            if produced <= 0:
                continue
            recipe = self.state.recipes.get(product.id)
            if recipe is None:
                continue
            for ing_id, qty in recipe.scale(produced).items():
                used[ing_id] = used.get(ing_id, 0.0) + qty

        return [
            IngredientUsage(
                ingredient_id=ing_id,
                name=ingredients[ing_id].name,
                unit=ingredients[ing_id].unit,
                used=round(amount, 3),
            )
            for ing_id, amount in sorted(used.items())
            if ing_id in ingredients
        ]
