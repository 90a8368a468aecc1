"""Product (cookie) catalog endpoints."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import get_catalog_service
from api.middleware.auth import require_permission
from cookiecogs.config.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_PRICE,
    DEFAULT_PRODUCTION_PRICE,
    DEFAULT_WARN_LEVEL,
)
from cookiecogs.models import Product
from cookiecogs.services import CatalogService

router = APIRouter()


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(default=DEFAULT_PRICE, ge=0)
    production_price: float = Field(default=DEFAULT_PRODUCTION_PRICE, ge=0)
    category: str = DEFAULT_CATEGORY
    warn_level: int = Field(default=DEFAULT_WARN_LEVEL, ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    production_price: Optional[float] = Field(default=None, ge=0)


class StockAdjustment(BaseModel):
    stock_delta: int = 0
    prepared_delta: int = 0


def product_summary(product: Product, service: CatalogService) -> Dict[str, Any]:
    """Product without its history, plus derived values."""
    data = product.model_dump(exclude={"history"})
    data["sold"] = product.sold
    data["warn_level"] = service.state.warn_level(product.name)
    data["status"] = service.product_status(product).value
    data["recorded_days"] = len(product.history)
    return data


# =============================================================================
# Catalog
# =============================================================================

@router.get("")
async def list_products(
    search: Optional[str] = Query(None, description="Name contains"),
    category: Optional[str] = Query(None),
    _user=Depends(require_permission("view_cookies")),
    service: CatalogService = Depends(get_catalog_service),
):
    products = service.list_products(search=search, category=category)
    return {
        "products": [product_summary(p, service) for p in products],
        "total": len(products),
    }


@router.get("/categories")
async def list_categories(
    _user=Depends(require_permission("view_cookies")),
    service: CatalogService = Depends(get_catalog_service),
):
    return {"categories": service.categories()}


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    include_history: bool = Query(False),
    _user=Depends(require_permission("view_cookies")),
    service: CatalogService = Depends(get_catalog_service),
):
    product = service.get_product(product_id)
    data = product_summary(product, service)
    if include_history:
        data["history"] = {
            day: {**record.model_dump(), "sold": record.sold}
            for day, record in sorted(product.history.items())
        }
    return data


@router.post("", status_code=201)
async def create_product(
    request: ProductCreate,
    _user=Depends(require_permission("add_cookies")),
    service: CatalogService = Depends(get_catalog_service),
):
    product = service.add_product(
        name=request.name,
        price=request.price,
        production_price=request.production_price,
        category=request.category,
        warn_level=request.warn_level,
    )
    return product_summary(product, service)


@router.patch("/{product_id}")
async def update_product(
    product_id: int,
    request: ProductUpdate,
    _user=Depends(require_permission("edit_cookies")),
    service: CatalogService = Depends(get_catalog_service),
):
    product = service.update_product(product_id, **request.model_dump(exclude_unset=True))
    return product_summary(product, service)


@router.post("/{product_id}/adjust")
async def adjust_product(
    product_id: int,
    request: StockAdjustment,
    _user=Depends(require_permission("edit_inventory")),
    service: CatalogService = Depends(get_catalog_service),
):
    """Add deltas to stock and prepared; results never go below zero."""
    product = service.adjust_product(product_id, request.stock_delta, request.prepared_delta)
    return product_summary(product, service)


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    _user=Depends(require_permission("delete_cookies")),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_product(product_id)
    return {"deleted": product_id}
