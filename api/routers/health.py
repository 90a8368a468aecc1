"""Health check endpoints."""

import os
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.config import Settings, get_settings
from api.dependencies import get_state
from cookiecogs.services import AppState

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic liveness check.

    Returns 200 if the service is running.
    """
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/health/ready")
async def readiness_check(
    settings: Settings = Depends(get_settings),
    state: AppState = Depends(get_state),
) -> Dict[str, Any]:
    """
    Readiness check.

    Checks:
    - State loaded from the store
    - Data directory writable (json backend only)
    """
    checks = {
        "state": {"status": "ok" if state.initialized else "error"},
        "storage": {"status": "ok", "backend": settings.storage_backend},
    }

    if settings.storage_backend == "json":
        try:
            os.makedirs(settings.data_dir, exist_ok=True)
            if not os.access(settings.data_dir, os.W_OK):
                checks["storage"] = {"status": "error", "message": "data_dir not writable"}
        except OSError as e:
            checks["storage"] = {"status": "error", "message": str(e)}

    all_ok = all(c.get("status") == "ok" for c in checks.values())

    return {
        "status": "ready" if all_ok else "degraded",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "version": settings.app_version,
        "checks": checks
    }


@router.get("/health/info")
async def service_info(
    settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    """Return service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": "development" if settings.debug else "production",
    }
