"""Daily records, sales channels and CSV sales import."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from api.dependencies import get_catalog_service, get_import_service
from api.middleware.auth import require_permission
from cookiecogs.models import ColumnMapping, DailyRecord, ImportResult, SalesChannel
from cookiecogs.models.common import iso_day
from cookiecogs.services import CatalogService, ImportService

router = APIRouter()


class DailyRecordUpdate(BaseModel):
    """Fields to overwrite on one day's record. Unset fields are kept."""
    verkauft_location: Optional[int] = None
    verkauft_ubereats: Optional[int] = None
    verkauft_wolt: Optional[int] = None
    verkauft_lieferando: Optional[int] = None
    verkauft_website: Optional[int] = None
    mitarbeiter_verbrauch: Optional[int] = None
    prepared: Optional[int] = None
    used: Optional[int] = None
    trash: Optional[int] = None
    new: Optional[int] = None
    inventur: Optional[int] = None


class ChannelAdjustment(BaseModel):
    delta: int = Field(..., description="Units to add (negative to remove)")
    day: Optional[date] = Field(None, description="YYYY-MM-DD, defaults to today")


class ImportRequest(BaseModel):
    csv: str = Field(..., description="CSV text including the header row")
    mapping: Optional[ColumnMapping] = Field(None, description="Guessed from headers when omitted")


class MappingRequest(BaseModel):
    csv: str


def _record_response(day: str, record: DailyRecord) -> dict:
    return {"date": day, **record.model_dump(), "sold": record.sold}


# =============================================================================
# Channels & daily records
# =============================================================================

@router.get("/channels")
async def list_channels():
    return {
        "channels": [
            {"channel": c.name.lower(), "field": c.value, "label": c.label, "revenue": c.is_revenue}
            for c in SalesChannel
        ]
    }


@router.get("/products/{product_id}/days/{day}")
async def get_day(
    product_id: int,
    day: date,
    _user=Depends(require_permission("view_tagesinfo")),
    service: CatalogService = Depends(get_catalog_service),
):
    return _record_response(day.isoformat(), service.get_day(product_id, day))


@router.put("/products/{product_id}/days/{day}")
async def update_day(
    product_id: int,
    day: date,
    request: DailyRecordUpdate,
    _user=Depends(require_permission("daily_tracking")),
    service: CatalogService = Depends(get_catalog_service),
):
    values = request.model_dump(exclude_unset=True)
    return _record_response(day.isoformat(), service.update_day(product_id, values, day))


@router.post("/products/{product_id}/channels/{channel}")
async def adjust_channel(
    product_id: int,
    channel: SalesChannel,
    request: ChannelAdjustment,
    _user=Depends(require_permission("daily_tracking")),
    service: CatalogService = Depends(get_catalog_service),
):
    """Increment one channel counter (path uses the field name, e.g. verkauft_wolt)."""
    day = iso_day(request.day)
    record = service.adjust_channel(product_id, channel, request.delta, day)
    return _record_response(day, record)


# =============================================================================
# CSV import
# =============================================================================

@router.post("/import", response_model=ImportResult)
async def import_sales(
    request: ImportRequest,
    _user=Depends(require_permission("daily_tracking")),
    service: ImportService = Depends(get_import_service),
):
    """Import per-channel sales; each summed value overwrites the stored one."""
    return service.import_csv(request.csv, request.mapping)


@router.post("/import/mapping", response_model=ColumnMapping)
async def suggest_mapping(
    request: MappingRequest,
    _user=Depends(require_permission("daily_tracking")),
    service: ImportService = Depends(get_import_service),
):
    df = service.read_csv(request.csv)
    return service.suggest_mapping(list(df.columns))


@router.get("/import/template")
async def import_template():
    return StreamingResponse(
        iter([ImportService.template_csv()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=cookie_sales_template.csv"}
    )
