"""
API Dependencies

Dependency injection for the shared state and the services built on it.
"""

from functools import lru_cache

from fastapi import Depends

from api.config import get_settings
from cookiecogs.services import (
    AppState,
    AuditService,
    AuthService,
    CatalogService,
    ImportService,
    PlanningService,
    ProductionService,
    StatsService,
)
from cookiecogs.storage import JsonStore, MemoryStore


@lru_cache()
def get_state() -> AppState:
    """Get the singleton application state (loaded in the app lifespan)."""
    settings = get_settings()
    if settings.storage_backend == "memory":
        store = MemoryStore()
    else:
        store = JsonStore(data_dir=settings.data_dir)
    return AppState(store)


def get_catalog_service(state: AppState = Depends(get_state)) -> CatalogService:
    return CatalogService(state)


def get_audit_service(state: AppState = Depends(get_state)) -> AuditService:
    return AuditService(state)


def get_production_service(state: AppState = Depends(get_state)) -> ProductionService:
    return ProductionService(state)


def get_import_service(state: AppState = Depends(get_state)) -> ImportService:
    return ImportService(state)


def get_planning_service(state: AppState = Depends(get_state)) -> PlanningService:
    return PlanningService(state)


def get_auth_service(state: AppState = Depends(get_state)) -> AuthService:
    return AuthService(state)


@lru_cache()
def get_stats_service() -> StatsService:
    """Get singleton stats service."""
    return StatsService()
