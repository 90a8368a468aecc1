"""
Seed catalog used when the store holds no data yet.

Products start with zero stock and an empty history. Each product gets a
warn level and an empty recipe so that later lookups never miss.
"""

from typing import Dict, List

from cookiecogs.config.constants import DEFAULT_BATCH_YIELD
from cookiecogs.models import (
    CostSettings,
    Ingredient,
    Product,
    Recipe,
    User,
    UserPermissions,
    UserRole,
    WebsiteSettings,
)

# (id, name, price, production price, category)
INITIAL_PRODUCTS = [
    (1, "Chocolate Chip", 2.50, 0.75, "Classic"),
    (2, "Oatmeal Raisin", 2.25, 0.65, "Classic"),
    (3, "Double Chocolate", 2.75, 0.85, "Premium"),
    (4, "Peanut Butter", 2.40, 0.70, "Classic"),
    (5, "White Chocolate Macadamia", 3.00, 0.95, "Premium"),
    (6, "Snickerdoodle", 2.35, 0.60, "Seasonal"),
    (7, "Lemon", 2.60, 0.80, "Seasonal"),
    (8, "Red Velvet", 2.85, 0.90, "Premium"),
    (9, "Salted Caramel", 2.90, 0.85, "Premium"),
]

INITIAL_WARN_LEVELS = {
    "Chocolate Chip": 20,
    "Oatmeal Raisin": 15,
    "Double Chocolate": 25,
    "Peanut Butter": 10,
    "White Chocolate Macadamia": 18,
    "Snickerdoodle": 12,
    "Lemon": 8,
    "Red Velvet": 15,
    "Salted Caramel": 20,
}

# (id, name, amount, unit, min stock, cost per unit, supplier)
INITIAL_INGREDIENTS = [
    (1, "Mehl (Weizenmehl Type 405)", 25.5, "kg", 10, 0.85, "Müller GmbH"),
    (2, "Zucker (Kristallzucker)", 18.2, "kg", 8, 1.20, "Süßwaren AG"),
    (3, "Butter (ungesalzen)", 12.8, "kg", 5, 6.50, "Molkerei Nord"),
    (4, "Eier (Größe M)", 144, "Stück", 60, 0.25, "Geflügelhof Schmidt"),
    (5, "Schokoladenchips (Vollmilch)", 8.5, "kg", 3, 8.90, "Choco Deluxe"),
    (6, "Vanilleextrakt", 0.5, "Liter", 0.2, 45.00, "Gewürze & Aromen"),
    (7, "Backpulver", 2.2, "kg", 1, 3.20, "Backhilfen Express"),
    (8, "Salz (fein)", 1.8, "kg", 0.5, 0.90, "Salz & Meer"),
    (9, "Haferflocken (kernig)", 6.3, "kg", 2, 2.40, "Getreide Zentral"),
    (10, "Rosinen", 3.1, "kg", 1, 4.80, "Trockenfrüchte Plus"),
]

DEFAULT_ADMIN = {
    "id": 1,
    "email": "admin@cookie.com",
    "login_code": "12345",
    "name": "Administrator",
}


def initial_products() -> List[Product]:
    return [
        Product(id=pid, name=name, price=price, production_price=cost, category=category)
        for pid, name, price, cost, category in INITIAL_PRODUCTS
    ]


def initial_warn_levels() -> Dict[str, int]:
    return dict(INITIAL_WARN_LEVELS)


def initial_ingredients() -> List[Ingredient]:
    return [
        Ingredient(
            id=iid,
            name=name,
            amount=amount,
            unit=unit,
            min_stock=min_stock,
            cost_per_unit=cost,
            supplier=supplier,
        )
        for iid, name, amount, unit, min_stock, cost, supplier in INITIAL_INGREDIENTS
    ]


def initial_recipes() -> Dict[int, Recipe]:
    """One empty recipe per seed product."""
    return {
        pid: Recipe(product_id=pid, batch_yield=DEFAULT_BATCH_YIELD)
        for pid, *_ in INITIAL_PRODUCTS
    }


def initial_users() -> List[User]:
    return [
        User(
            role=UserRole.ADMIN,
            permissions=UserPermissions.admin(),
            **DEFAULT_ADMIN,
        )
    ]


def initial_settings() -> CostSettings:
    return CostSettings()


def initial_website_settings() -> WebsiteSettings:
    return WebsiteSettings()
