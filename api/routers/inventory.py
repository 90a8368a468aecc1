"""Stock audit (SOLL/IST) endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import get_audit_service, get_catalog_service
from api.middleware.auth import require_permission
from cookiecogs.models import AuditCount, AuditLogSummary, AuditPreview, InventoryAudit, User
from cookiecogs.services import AuditService, CatalogService
from cookiecogs.services.audit_service import expected_stock

router = APIRouter()


class AuditRequest(BaseModel):
    counts: List[AuditCount] = Field(default_factory=list)
    day: Optional[date] = Field(None, description="YYYY-MM-DD, defaults to today")


def _preview_response(preview: AuditPreview) -> dict:
    return {**preview.model_dump(), "is_complete": preview.is_complete}


@router.get("/stock")
async def stock_overview(
    _user=Depends(require_permission("view_inventory")),
    service: CatalogService = Depends(get_catalog_service),
):
    """Current stock, SOLL and status for every product."""
    return {
        "products": [
            {
                "product_id": p.id,
                "name": p.name,
                "stock": p.stock,
                "prepared": p.prepared,
                "soll": expected_stock(p),
                "warn_level": service.state.warn_level(p.name),
                "status": service.product_status(p).value,
            }
            for p in service.state.products
        ]
    }


@router.post("/audits/preview")
async def preview_audit(
    request: AuditRequest,
    _user=Depends(require_permission("perform_inventory")),
    service: AuditService = Depends(get_audit_service),
):
    """Reconcile counts against SOLL without saving anything."""
    return _preview_response(service.preview(request.counts))


@router.post("/audits")
async def complete_audit(
    request: AuditRequest,
    user: User = Depends(require_permission("perform_inventory")),
    service: AuditService = Depends(get_audit_service),
):
    """
    Complete an audit.

    Nothing is saved unless every product has a count; the response then
    has completed=false and the preview showing what is missing.
    """
    audit = service.complete(request.counts, user, day=request.day)
    if audit is None:
        return {
            "completed": False,
            "audit": None,
            "preview": _preview_response(service.preview(request.counts)),
        }
    return {"completed": True, "audit": audit.model_dump(mode="json"), "preview": None}


@router.get("/audits", response_model=List[InventoryAudit])
async def list_audits(
    search: Optional[str] = Query(None, description="User, date or product name"),
    period: str = Query("all", description="all, 7days, 30days or 90days"),
    _user=Depends(require_permission("view_inventory_log")),
    service: AuditService = Depends(get_audit_service),
):
    return service.list_audits(search=search, period=period)


@router.get("/audits/summary", response_model=AuditLogSummary)
async def audit_summary(
    search: Optional[str] = Query(None),
    period: str = Query("all"),
    _user=Depends(require_permission("view_inventory_log")),
    service: AuditService = Depends(get_audit_service),
):
    return service.summary(search=search, period=period)


@router.get("/audits/{audit_id}", response_model=InventoryAudit)
async def get_audit(
    audit_id: str,
    _user=Depends(require_permission("view_inventory_log")),
    service: AuditService = Depends(get_audit_service),
):
    return service.get_audit(audit_id)
