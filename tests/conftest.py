"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["DEBUG"] = "true"
os.environ["AUTH_DISABLED"] = "false"
os.environ["STORAGE_BACKEND"] = "memory"

from cookiecogs.models import DailyRecord  # noqa: E402
from cookiecogs.services import (  # noqa: E402
    AppState,
    AuditService,
    AuthService,
    CatalogService,
    ImportService,
    PlanningService,
    ProductionService,
    StatsService,
)
from cookiecogs.storage import MemoryStore  # noqa: E402

ADMIN_CODE = "12345"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# State & services
# =============================================================================

@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def state(store) -> AppState:
    """State loaded from an empty store, i.e. the seed catalog."""
    return AppState(store).load()


@pytest.fixture
def catalog(state) -> CatalogService:
    return CatalogService(state)


@pytest.fixture
def audits(state) -> AuditService:
    return AuditService(state)


@pytest.fixture
def production(state) -> ProductionService:
    return ProductionService(state)


@pytest.fixture
def importer(state) -> ImportService:
    return ImportService(state)


@pytest.fixture
def planning(state) -> PlanningService:
    return PlanningService(state)


@pytest.fixture
def auth(state) -> AuthService:
    return AuthService(state)


@pytest.fixture
def stats() -> StatsService:
    return StatsService()


@pytest.fixture
def sample_history(state) -> AppState:
    """
    Three days of records for Chocolate Chip (id 1) and Lemon (id 7).

    Chocolate Chip sells 10/12/14 across channels, Lemon sells 5 each day
    through the location only.
    """
    choc = state.get_product(1)
    lemon = state.get_product(7)

    for i, day in enumerate(["2025-01-14", "2025-01-15", "2025-01-16"]):
        choc.history[day] = DailyRecord(
            verkauft_location=6 + i,
            verkauft_ubereats=2 + i,
            verkauft_wolt=2,
            mitarbeiter_verbrauch=1,
            prepared=20,
            trash=1,
            new=20,
            produziert=20,
        )
        lemon.history[day] = DailyRecord(
            verkauft_location=5,
            prepared=10,
            new=10,
            produziert=10,
        )
    return state


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    """Create a FastAPI test client over a fresh in-memory state."""
    from api.dependencies import get_state
    from api.main import app

    get_state.cache_clear()
    with TestClient(app) as client:
        yield client
    get_state.cache_clear()


@pytest.fixture
def admin_headers() -> dict:
    return {"X-Login-Code": ADMIN_CODE}
