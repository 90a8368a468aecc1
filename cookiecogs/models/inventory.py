"""
Inventory Audit Models

Counted (IST) vs expected (SOLL) stock per product across the three
storage locations, and the append-only audit log.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cookiecogs.models.common import utcnow


class AuditStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


class Deviation(str, Enum):
    """How far a counted value is from the expected one."""
    NOT_ASSESSED = "not_assessed"
    EXACT = "exact"
    MINOR = "minor"
    MAJOR = "major"


class AuditCount(BaseModel):
    """
    Counted quantities for one product.

    None means "not counted yet", which is different from a count of zero.
    """
    product_id: int
    lager_verpackt: Optional[int] = Field(default=None, ge=0, description="Packaged stock")
    lager_versand: Optional[int] = Field(default=None, ge=0, description="Shipping stock")
    location: Optional[int] = Field(default=None, ge=0, description="Point of sale")
    comment: str = ""

    @property
    def is_counted(self) -> bool:
        return any(v is not None for v in (self.lager_verpackt, self.lager_versand, self.location))

    @property
    def ist_total(self) -> int:
        return (self.lager_verpackt or 0) + (self.lager_versand or 0) + (self.location or 0)


class AuditLine(BaseModel):
    """One product's line in an audit."""
    model_config = ConfigDict(frozen=True)

    product_id: int
    product_name: str
    soll: int
    ist_lager_verpackt: int = 0
    ist_lager_versand: int = 0
    ist_location: int = 0
    ist_final: int = 0
    difference: Optional[int] = None
    comment: str = ""


class AuditPreviewLine(BaseModel):
    """Live reconciliation line shown while counting."""
    product_id: int
    product_name: str
    soll: int
    ist_final: int
    difference: Optional[int] = None
    deviation: Deviation = Deviation.NOT_ASSESSED
    low_stock: bool = False
    counted: bool = False


class AuditPreview(BaseModel):
    """Reconciliation of a (possibly partial) set of counts."""
    lines: List[AuditPreviewLine] = Field(default_factory=list)
    total_difference: int = 0
    counted_products: int = 0
    total_products: int = 0
    low_stock_count: int = 0

    @property
    def is_complete(self) -> bool:
        return self.counted_products == self.total_products


class InventoryAudit(BaseModel):
    """A completed audit. Never modified after creation."""
    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    user: str
    user_name: str
    lines: List[AuditLine] = Field(default_factory=list)
    total_difference: int = 0
    status: AuditStatus = AuditStatus.COMPLETED
    created_at: datetime = Field(default_factory=utcnow)


class AuditLogSummary(BaseModel):
    """Aggregate view over the audit log."""
    audit_count: int = 0
    total_differences: int = 0
    average_total_difference: float = 0.0
    recent_audits: int = 0
    last_audit_date: Optional[str] = None
