"""cookieCOGS Services - Business Logic"""

from cookiecogs.services.audit_service import AuditService
from cookiecogs.services.auth_service import AuthService
from cookiecogs.services.catalog_service import CatalogService
from cookiecogs.services.errors import (
    CookieCogsError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from cookiecogs.services.import_service import ImportService
from cookiecogs.services.planning_service import PlanningService
from cookiecogs.services.production_service import ProductionService
from cookiecogs.services.state import AppState
from cookiecogs.services.stats_service import StatsService

__all__ = [
    "AppState",
    "AuditService",
    "AuthService",
    "CatalogService",
    "ImportService",
    "PlanningService",
    "ProductionService",
    "StatsService",
    "CookieCogsError",
    "NotFoundError",
    "ValidationError",
    "InsufficientStockError",
]
