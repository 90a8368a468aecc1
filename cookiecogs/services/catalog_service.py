"""
Catalog Service - products, daily records, ingredients, recipes, settings

Every command runs under the state lock and ends with a commit of the
collections it touched.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cookiecogs.config.constants import (
    CRITICAL_PERCENT,
    DEFAULT_BATCH_YIELD,
    DEFAULT_CATEGORY,
    DEFAULT_PRICE,
    DEFAULT_PRODUCTION_PRICE,
    DEFAULT_WARN_LEVEL,
    LOW_PERCENT,
    SHOPPING_FALLBACK_MIN,
)
from cookiecogs.models import (
    CostSettings,
    DailyRecord,
    Ingredient,
    Product,
    Recipe,
    SalesChannel,
    ShoppingList,
    ShoppingListEntry,
    StockStatus,
    WebsiteSettings,
)
from cookiecogs.models.common import today_iso
from cookiecogs.services.errors import NotFoundError, ValidationError
from cookiecogs.services.state import (
    COOKIES,
    INGREDIENTS,
    RECIPES,
    SETTINGS,
    WARN_LEVELS,
    WEBSITE_SETTINGS,
    AppState,
    next_id,
    resolve_day,
)

logger = logging.getLogger(__name__)

DAY_FIELDS = set(DailyRecord.model_fields) - {"legacy_sold"}
NULLABLE_WEBSITE_FIELDS = {"logo"}


def _validated(model: BaseModel, updates: Dict[str, Any], exclude: Optional[set] = None):
    """
    A validated copy of `model` with `updates` applied.

    Raises the domain ValidationError so nothing is mutated when any
    field is rejected.
    """
    data = {**model.model_dump(exclude=exclude), **updates}
    try:
        return type(model).model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid values",
            details={"errors": [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]},
        ) from None


def stock_status(amount: float, threshold: float) -> StockStatus:
    """
    Classify stock against a warn threshold.

    <= 50% is critical, <= 100% is low. A non-positive threshold means no
    threshold is configured, which is always good.
    """
    if threshold <= 0:
        return StockStatus.GOOD
    percent = (amount / threshold) * 100
    if percent <= CRITICAL_PERCENT:
        return StockStatus.CRITICAL
    if percent <= LOW_PERCENT:
        return StockStatus.LOW
    return StockStatus.GOOD


class CatalogService:
    """CRUD for everything the dashboard edits directly."""

    def __init__(self, state: AppState):
        self.state = state

    # =========================================================================
    # Products
    # =========================================================================

    def list_products(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Product]:
        result = list(self.state.products)

        if search:
            search_lower = search.lower()
            result = [p for p in result if search_lower in p.name.lower()]

        if category:
            result = [p for p in result if p.category == category]

        return result

    def categories(self) -> List[str]:
        return sorted({p.category for p in self.state.products})

    def get_product(self, product_id: int) -> Product:
        return self.state.get_product(product_id)

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Product name is required")
        existing = self.state.find_product(name)
        if existing and existing.id != exclude_id:
            raise ValidationError(f"A product named '{name}' already exists")
        return name

    def add_product(
        self,
        name: str,
        price: float = DEFAULT_PRICE,
        production_price: float = DEFAULT_PRODUCTION_PRICE,
        category: str = DEFAULT_CATEGORY,
        warn_level: int = DEFAULT_WARN_LEVEL,
    ) -> Product:
        """Add a product with its warn level and an empty recipe."""
        with self.state.lock:
            name = self._check_name(name)
            product = Product(
                id=next_id(self.state.products),
                name=name,
                price=price,
                production_price=production_price,
                category=category or DEFAULT_CATEGORY,
            )
            self.state.products.append(product)
            self.state.warn_levels[name] = warn_level
            self.state.recipes[product.id] = Recipe(product_id=product.id, batch_yield=DEFAULT_BATCH_YIELD)

            logger.info(f"Added product {product.id}: {name}")
            self.state.commit(COOKIES, WARN_LEVELS, RECIPES)
            return product

    def update_product(self, product_id: int, **changes) -> Product:
        """
        Update name, category, price or production price.

        A rename moves the product's warn level to the new name.
        """
        allowed = {"name", "category", "price", "production_price"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self.state.lock:
            product = self.state.get_product(product_id)
            keys = [COOKIES]

            updates = {k: v for k, v in changes.items() if v is not None and k != "name"}
            new_name = changes.get("name")
            renamed = new_name is not None and new_name.strip() != product.name
            if renamed:
                updates["name"] = self._check_name(new_name, exclude_id=product.id)
            _validated(product, updates, exclude={"history"})

            old_name = product.name
            for field, value in updates.items():
                setattr(product, field, value)
            if renamed and old_name in self.state.warn_levels:
                self.state.warn_levels[product.name] = self.state.warn_levels.pop(old_name)
                keys.append(WARN_LEVELS)

            logger.info(f"Updated product {product_id}")
            self.state.commit(*keys)
            return product

    def delete_product(self, product_id: int):
        """Remove a product together with its warn level and recipe."""
        with self.state.lock:
            product = self.state.get_product(product_id)
            self.state.products = [p for p in self.state.products if p.id != product_id]
            self.state.warn_levels.pop(product.name, None)
            self.state.recipes.pop(product_id, None)

            logger.info(f"Deleted product {product_id}: {product.name}")
            self.state.commit(COOKIES, WARN_LEVELS, RECIPES)

    def adjust_product(self, product_id: int, stock_delta: int = 0, prepared_delta: int = 0) -> Product:
        """Add deltas to stock/prepared. Results clamp at zero."""
        with self.state.lock:
            product = self.state.get_product(product_id)
            product.stock = product.stock + stock_delta
            product.prepared = product.prepared + prepared_delta
            self.state.commit(COOKIES)
            return product

    # =========================================================================
    # Daily records
    # =========================================================================

    def get_day(self, product_id: int, day: Optional[str] = None) -> DailyRecord:
        product = self.state.get_product(product_id)
        return product.peek_record(resolve_day(day))

    def update_day(self, product_id: int, values: Dict[str, Any], day: Optional[str] = None) -> DailyRecord:
        """
        Overwrite some fields of one day's record.

        Writing any channel field clears the legacy aggregate.
        """
        unknown = set(values) - DAY_FIELDS
        if unknown:
            raise ValidationError(f"Unknown daily fields: {', '.join(sorted(unknown))}")
        day = resolve_day(day)

        with self.state.lock:
            product = self.state.get_product(product_id)
            updates = dict(values)
            channel_fields = {c.value for c in SalesChannel}
            if channel_fields & set(values):
                updates["legacy_sold"] = 0

            record = _validated(product.peek_record(day), updates)
            product.history[day] = record

            self.state.commit(COOKIES)
            return record

    def adjust_channel(
        self,
        product_id: int,
        channel: SalesChannel,
        delta: int,
        day: Optional[str] = None,
    ) -> DailyRecord:
        """Increment one channel counter (clamped at zero)."""
        day = resolve_day(day)
        with self.state.lock:
            product = self.state.get_product(product_id)
            record = product.record_for(day)
            record.set_channel(channel, record.get_channel(channel) + delta)
            self.state.commit(COOKIES)
            return record

    # =========================================================================
    # Ingredients
    # =========================================================================

    def ingredient_status(self, ingredient: Ingredient) -> StockStatus:
        return stock_status(ingredient.amount, ingredient.min_stock)

    def list_ingredients(self, search: Optional[str] = None, status: str = "all") -> List[Ingredient]:
        """
        Filter ingredients.

        Args:
            search: Matches name or supplier
            status: "all", "low" (low or critical) or "critical"
        """
        result = list(self.state.ingredients)

        if search:
            search_lower = search.lower()
            result = [
                i for i in result
                if search_lower in i.name.lower() or search_lower in i.supplier.lower()
            ]

        if status == "low":
            result = [i for i in result if self.ingredient_status(i) != StockStatus.GOOD]
        elif status == "critical":
            result = [i for i in result if self.ingredient_status(i) == StockStatus.CRITICAL]
        elif status != "all":
            raise ValidationError(f"Unknown status filter: {status}")

        return result

    def ingredient_overview(self) -> Dict[str, Any]:
        statuses = [self.ingredient_status(i) for i in self.state.ingredients]
        return {
            "total_ingredients": len(self.state.ingredients),
            "total_value": round(sum(i.stock_value for i in self.state.ingredients), 2),
            "low_count": sum(1 for s in statuses if s == StockStatus.LOW),
            "critical_count": sum(1 for s in statuses if s == StockStatus.CRITICAL),
        }

    def get_ingredient(self, ingredient_id: int) -> Ingredient:
        return self.state.get_ingredient(ingredient_id)

    def add_ingredient(
        self,
        name: str,
        amount: float,
        unit: str,
        min_stock: float = 1.0,
        cost_per_unit: float = 0.0,
        supplier: str = "",
    ) -> Ingredient:
        if not (name or "").strip() or not (unit or "").strip():
            raise ValidationError("Ingredient name and unit are required")
        if amount is None:
            raise ValidationError("Ingredient amount is required")

        with self.state.lock:
            ingredient = Ingredient(
                id=next_id(self.state.ingredients),
                name=name.strip(),
                amount=amount,
                unit=unit.strip(),
                min_stock=min_stock,
                cost_per_unit=cost_per_unit,
                supplier=supplier.strip() or "Unbekannt",
            )
            self.state.ingredients.append(ingredient)

            logger.info(f"Added ingredient {ingredient.id}: {ingredient.name}")
            self.state.commit(INGREDIENTS)
            return ingredient

    def update_ingredient(self, ingredient_id: int, **changes) -> Ingredient:
        allowed = {"name", "amount", "unit", "min_stock", "cost_per_unit", "supplier"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self.state.lock:
            ingredient = self.state.get_ingredient(ingredient_id)
            updates = {k: v for k, v in changes.items() if v is not None}
            _validated(ingredient, updates)

            for field, value in updates.items():
                setattr(ingredient, field, value)
            ingredient.last_updated = today_iso()

            self.state.commit(INGREDIENTS)
            return ingredient

    def adjust_ingredient(self, ingredient_id: int, delta: float) -> Ingredient:
        """Add `delta` to the amount on hand (clamped at zero)."""
        with self.state.lock:
            ingredient = self.state.get_ingredient(ingredient_id)
            ingredient.amount = ingredient.amount + delta
            ingredient.last_updated = today_iso()

            self.state.commit(INGREDIENTS)
            return ingredient

    def delete_ingredient(self, ingredient_id: int):
        """Remove an ingredient and drop it from every recipe."""
        with self.state.lock:
            ingredient = self.state.get_ingredient(ingredient_id)
            self.state.ingredients = [i for i in self.state.ingredients if i.id != ingredient_id]
            for recipe in self.state.recipes.values():
                recipe.ingredients.pop(ingredient_id, None)

            logger.info(f"Deleted ingredient {ingredient_id}: {ingredient.name}")
            self.state.commit(INGREDIENTS, RECIPES)

    # =========================================================================
    # Recipes
    # =========================================================================

    def get_recipe(self, product_id: int) -> Recipe:
        self.state.get_product(product_id)
        return self.state.recipe_for(product_id)

    def _stored_recipe(self, product_id: int) -> Recipe:
        self.state.get_product(product_id)
        recipe = self.state.recipe_for(product_id)
        self.state.recipes[product_id] = recipe
        return recipe

    def set_recipe_ingredient(self, product_id: int, ingredient_id: int, quantity: float) -> Recipe:
        """Set one ingredient quantity. Zero removes it from the recipe."""
        if quantity < 0:
            raise ValidationError("Recipe quantity cannot be negative")

        with self.state.lock:
            self.state.get_ingredient(ingredient_id)
            recipe = self._stored_recipe(product_id)
            if quantity == 0:
                recipe.ingredients.pop(ingredient_id, None)
            else:
                recipe.ingredients[ingredient_id] = quantity
            self.state.commit(RECIPES)
            return recipe

    def set_recipe_yield(self, product_id: int, batch_yield: int) -> Recipe:
        if batch_yield <= 0:
            raise ValidationError("Batch yield must be positive")

        with self.state.lock:
            recipe = self._stored_recipe(product_id)
            recipe.batch_yield = batch_yield
            self.state.commit(RECIPES)
            return recipe

    def set_recipe_notes(self, product_id: int, notes: str) -> Recipe:
        with self.state.lock:
            recipe = self._stored_recipe(product_id)
            recipe.notes = notes or ""
            self.state.commit(RECIPES)
            return recipe

    # =========================================================================
    # Warn levels & settings
    # =========================================================================

    def warn_levels(self) -> Dict[str, int]:
        return dict(self.state.warn_levels)

    def set_warn_level(self, product_name: str, level: int) -> Dict[str, int]:
        if level < 0:
            raise ValidationError("Warn level cannot be negative")
        with self.state.lock:
            product = self.state.find_product(product_name)
            if product is None:
                raise NotFoundError("Product", product_name)
            self.state.warn_levels[product.name] = level
            self.state.commit(WARN_LEVELS)
            return dict(self.state.warn_levels)

    def replace_warn_levels(self, levels: Dict[str, int]) -> Dict[str, int]:
        if any(v < 0 for v in levels.values()):
            raise ValidationError("Warn level cannot be negative")
        with self.state.lock:
            self.state.warn_levels = dict(levels)
            self.state.commit(WARN_LEVELS)
            return dict(self.state.warn_levels)

    def product_status(self, product: Product) -> StockStatus:
        return stock_status(product.stock, self.state.warn_level(product.name))

    def update_settings(self, **changes) -> CostSettings:
        with self.state.lock:
            updates = {k: v for k, v in changes.items() if v is not None}
            self.state.settings = _validated(self.state.settings, updates)
            self.state.commit(SETTINGS)
            return self.state.settings

    def update_website_settings(self, **changes) -> WebsiteSettings:
        """Merge changes. None clears the logo and is ignored for every other field."""
        with self.state.lock:
            updates = {
                k: v for k, v in changes.items()
                if v is not None or k in NULLABLE_WEBSITE_FIELDS
            }
            self.state.website_settings = _validated(self.state.website_settings, updates)
            self.state.commit(WEBSITE_SETTINGS)
            return self.state.website_settings

    # =========================================================================
    # Shopping list
    # =========================================================================

    def shopping_list(self) -> ShoppingList:
        """
        Ingredients below their minimum, most urgent first.

        The minimum is the warn level stored under the ingredient's name,
        else its own min_stock, else 2.
        """
        entries = []
        for ingredient in self.state.ingredients:
            minimum = (
                self.state.warn_levels.get(ingredient.name)
                or ingredient.min_stock
                or SHOPPING_FALLBACK_MIN
            )
            if ingredient.amount >= minimum:
                continue

            recommended = max(minimum * 2 - ingredient.amount, minimum)
            entries.append(ShoppingListEntry(
                ingredient_id=ingredient.id,
                name=ingredient.name,
                amount=ingredient.amount,
                unit=ingredient.unit,
                min_stock=minimum,
                recommended_order=round(recommended, 2),
                cost_per_unit=ingredient.cost_per_unit,
                supplier=ingredient.supplier,
                estimated_cost=round(recommended * ingredient.cost_per_unit, 2),
                urgency=round(ingredient.amount / minimum, 4),
            ))

        entries.sort(key=lambda e: e.urgency)
        return ShoppingList(
            entries=entries,
            total_estimated_cost=round(sum(e.estimated_cost for e in entries), 2),
            generated_for=today_iso(),
        )
