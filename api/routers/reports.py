"""Statistics and CSV export endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from api.dependencies import get_catalog_service, get_state, get_stats_service
from api.middleware.auth import require_permission
from cookiecogs.models import DateRange, DayTotals, SalesChannel
from cookiecogs.services import AppState, CatalogService, StatsService
from cookiecogs.services import export_service

router = APIRouter()


def _day_response(totals: DayTotals) -> dict:
    return {
        **totals.model_dump(mode="json"),
        "waste_rate": round(totals.waste_rate, 1),
        "efficiency": round(totals.efficiency, 1),
    }


def _csv_response(content: str, prefix: str) -> StreamingResponse:
    filename = export_service.export_filename(prefix)
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# =============================================================================
# Statistics
# =============================================================================

@router.get("/dashboard")
async def dashboard(
    _user=Depends(require_permission("view_dashboard")),
    state: AppState = Depends(get_state),
    stats: StatsService = Depends(get_stats_service),
):
    products = state.products
    return {
        "totals": stats.dashboard_totals(products, state.warn_levels),
        "today": _day_response(stats.today(products)),
        "top_sellers": stats.top_sellers(products),
        "categories": stats.category_breakdown(products),
        "trend": stats.sales_trend(products),
    }


@router.get("/days")
async def daily_totals(
    limit: Optional[int] = Query(None, gt=0, description="Most recent N recorded days"),
    _user=Depends(require_permission("view_tagesinfo")),
    state: AppState = Depends(get_state),
    stats: StatsService = Depends(get_stats_service),
):
    return {"days": [_day_response(d) for d in stats.all_days(state.products, limit)]}


@router.get("/period")
async def period_totals(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    last_days: Optional[int] = Query(None, gt=0, description="Overrides start/end with the last N recorded days"),
    product_ids: Optional[List[int]] = Query(None),
    channel: Optional[SalesChannel] = Query(None),
    _user=Depends(require_permission("view_stats")),
    state: AppState = Depends(get_state),
    stats: StatsService = Depends(get_stats_service),
):
    """Per-product sold, produced, revenue, cost and margin over a range."""
    period = stats.last_n_days(state.products, last_days) if last_days else DateRange(start=start, end=end)
    totals = stats.period_totals(state.products, period, product_ids, channel)
    return {
        "period": period,
        "products": [{**t.model_dump(mode="json"), "margin": round(t.margin, 2)} for t in totals],
        "revenue": round(sum(t.revenue for t in totals), 2),
        "cost": round(sum(t.cost for t in totals), 2),
    }


@router.get("/channels")
async def channel_breakdown(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    _user=Depends(require_permission("view_stats")),
    state: AppState = Depends(get_state),
    stats: StatsService = Depends(get_stats_service),
):
    breakdown = stats.channel_breakdown(state.products, DateRange(start=start, end=end))
    return {
        "channels": [
            {"channel": c.value, "label": c.label, "revenue": c.is_revenue, "sold": breakdown[c]}
            for c in SalesChannel
        ]
    }


# =============================================================================
# CSV exports
# =============================================================================

@router.get("/export/daily")
async def export_daily(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    _user=Depends(require_permission("export_data")),
    state: AppState = Depends(get_state),
):
    content = export_service.daily_report(state.products, DateRange(start=start, end=end))
    return _csv_response(content, "cookie_tagesbericht")


@router.get("/export/summary")
async def export_summary(
    _user=Depends(require_permission("export_data")),
    state: AppState = Depends(get_state),
):
    return _csv_response(export_service.summary_report(state.products), "cookie_zusammenfassung")


@router.get("/export/audits")
async def export_audits(
    _user=Depends(require_permission("export_data")),
    state: AppState = Depends(get_state),
):
    return _csv_response(export_service.audit_report(state.audits), "inventur_log")


@router.get("/export/recipes")
async def export_recipes(
    _user=Depends(require_permission("export_data")),
    state: AppState = Depends(get_state),
):
    content = export_service.recipe_report(state.products, state.recipes, state.ingredients)
    return _csv_response(content, "rezepte")


@router.get("/export/plans")
async def export_plans(
    _user=Depends(require_permission("export_data")),
    state: AppState = Depends(get_state),
):
    return _csv_response(export_service.plan_report(state.plans), "produktionsplanung")


@router.get("/export/shopping-list")
async def export_shopping_list(
    _user=Depends(require_permission("export_data")),
    service: CatalogService = Depends(get_catalog_service),
):
    return _csv_response(export_service.shopping_report(service.shopping_list()), "einkaufsliste")
