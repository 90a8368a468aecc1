"""cookieCOGS Data Models"""

from cookiecogs.models.catalog import DailyRecord, Ingredient, Product, Recipe
from cookiecogs.models.common import (
    DateRange,
    Priority,
    SalesChannel,
    StockStatus,
)
from cookiecogs.models.costing import (
    CostBreakdown,
    IngredientRequirement,
    IngredientUsage,
    ProductionResult,
    RecipeCost,
    ShoppingList,
    ShoppingListEntry,
)
from cookiecogs.models.inventory import (
    AuditCount,
    AuditLine,
    AuditLogSummary,
    AuditPreview,
    AuditPreviewLine,
    AuditStatus,
    Deviation,
    InventoryAudit,
)
from cookiecogs.models.planning import ProductionPlan, Todo
from cookiecogs.models.sales import (
    CategoryTotals,
    ColumnMapping,
    DashboardTotals,
    DayTotals,
    ImportResult,
    ImportRow,
    MappingResult,
    ProductPeriodTotals,
    SalesTrend,
)
from cookiecogs.models.settings import CostSettings, WebsiteSettings
from cookiecogs.models.users import (
    PublicUser,
    User,
    UserCreate,
    UserPermissions,
    UserRole,
    UserUpdate,
)

__all__ = [
    # Common
    "SalesChannel", "StockStatus", "Priority", "DateRange",
    # Catalog
    "Product", "DailyRecord", "Ingredient", "Recipe",
    # Inventory
    "AuditCount", "AuditLine", "AuditPreview", "AuditPreviewLine", "AuditStatus",
    "Deviation", "InventoryAudit", "AuditLogSummary",
    # Costing
    "CostBreakdown", "IngredientRequirement", "IngredientUsage", "ProductionResult",
    "RecipeCost", "ShoppingList", "ShoppingListEntry",
    # Sales
    "ProductPeriodTotals", "DayTotals", "DashboardTotals", "CategoryTotals", "SalesTrend",
    "ColumnMapping", "ImportRow", "MappingResult", "ImportResult",
    # Planning
    "Todo", "ProductionPlan",
    # Settings
    "CostSettings", "WebsiteSettings",
    # Users
    "User", "UserRole", "UserPermissions", "UserCreate", "UserUpdate", "PublicUser",
]
