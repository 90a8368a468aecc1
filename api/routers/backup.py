"""Backup export/import and reset endpoints."""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import StreamingResponse

from api.dependencies import get_state
from api.middleware.auth import require_permission
from cookiecogs.services import AppState
from cookiecogs.services.export_service import export_filename

logger = logging.getLogger(__name__)

router = APIRouter()

admin_only = Depends(require_permission("manage_users"))


@router.get("/export")
async def export_backup(
    _user=Depends(require_permission("export_data")),
    state: AppState = Depends(get_state),
):
    """Every collection as one JSON document."""
    doc = state.export_backup()
    return StreamingResponse(
        iter([json.dumps(doc, ensure_ascii=False, indent=2)]),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={export_filename('cookie-backup', 'json')}"}
    )


@router.post("/import")
async def import_backup(
    doc: Dict[str, Any] = Body(...),
    _user=admin_only,
    state: AppState = Depends(get_state),
):
    """
    Replace collections from a backup document.

    The document is validated as a whole first; collections it does not
    contain are kept.
    """
    state.import_backup(doc)
    return {
        "imported": True,
        "products": len(state.products),
        "ingredients": len(state.ingredients),
        "audits": len(state.audits),
    }


@router.post("/reset")
async def reset_data(_user=admin_only, state: AppState = Depends(get_state)):
    """Wipe all data and restore the seed catalog."""
    logger.warning("Resetting all data to the seed catalog")
    state.reset()
    return {"reset": True, "products": len(state.products)}
