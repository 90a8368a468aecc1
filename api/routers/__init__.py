"""API Routers"""

from api.routers import (
    auth,
    backup,
    health,
    ingredients,
    inventory,
    planning,
    production,
    products,
    recipes,
    reports,
    sales,
    settings,
    users,
)

__all__ = [
    "auth", "backup", "health", "ingredients", "inventory", "planning",
    "production", "products", "recipes", "reports", "sales", "settings", "users",
]
