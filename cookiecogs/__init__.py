"""
cookieCOGS Core Package

Business logic for a cookie bakery: catalog, daily multi-channel sales,
production with recipe-based ingredient consumption, stock audits and
cost/margin math. No web framework imports in this package.
"""

__version__ = "1.0.0"

from cookiecogs.models.catalog import DailyRecord, Ingredient, Product, Recipe
from cookiecogs.models.common import SalesChannel, StockStatus
from cookiecogs.models.costing import CostBreakdown
from cookiecogs.models.inventory import AuditCount, InventoryAudit

__all__ = [
    "Product",
    "DailyRecord",
    "Ingredient",
    "Recipe",
    "SalesChannel",
    "StockStatus",
    "CostBreakdown",
    "AuditCount",
    "InventoryAudit",
]
