"""Cost settings, website settings and warn level endpoints."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.dependencies import get_catalog_service
from api.middleware.auth import require_permission
from cookiecogs.models import CostSettings, WebsiteSettings
from cookiecogs.services import CatalogService

router = APIRouter()


class CostSettingsUpdate(BaseModel):
    cost_per_cookie: Optional[float] = Field(None, ge=0)
    cost_per_hour: Optional[float] = Field(None, ge=0)


class WebsiteSettingsUpdate(BaseModel):
    company_name: Optional[str] = None
    logo: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    button_bg_color: Optional[str] = None


class WarnLevelUpdate(BaseModel):
    level: int = Field(..., ge=0)


@router.get("/cost", response_model=CostSettings)
async def get_cost_settings(
    _user=Depends(require_permission("view_settings")),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.state.settings


@router.patch("/cost", response_model=CostSettings)
async def update_cost_settings(
    request: CostSettingsUpdate,
    _user=Depends(require_permission("edit_settings")),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_settings(**request.model_dump(exclude_unset=True))


@router.get("/website", response_model=WebsiteSettings)
async def get_website_settings(service: CatalogService = Depends(get_catalog_service)):
    """Branding is public so the login screen can use it."""
    return service.state.website_settings


@router.patch("/website", response_model=WebsiteSettings)
async def update_website_settings(
    request: WebsiteSettingsUpdate,
    _user=Depends(require_permission("edit_settings")),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_website_settings(**request.model_dump(exclude_unset=True))


@router.get("/warn-levels")
async def get_warn_levels(
    _user=Depends(require_permission("view_inventory")),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, int]:
    return service.warn_levels()


@router.put("/warn-levels")
async def replace_warn_levels(
    levels: Dict[str, int],
    _user=Depends(require_permission("edit_inventory")),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, int]:
    return service.replace_warn_levels(levels)


@router.put("/warn-levels/{product_name}")
async def set_warn_level(
    product_name: str,
    request: WarnLevelUpdate,
    _user=Depends(require_permission("edit_inventory")),
    service: CatalogService = Depends(get_catalog_service),
) -> Dict[str, int]:
    return service.set_warn_level(product_name, request.level)
