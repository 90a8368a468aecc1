"""
Sales Data Models

Aggregations over the per-day channel records and the CSV import
pipeline (column mapping, normalised rows, import result).
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from cookiecogs.models.common import SalesChannel


class ProductPeriodTotals(BaseModel):
    """One product's totals over a date range."""
    product_id: int
    name: str
    category: str
    produced: int = 0
    sold: int = 0
    staff_consumption: int = 0
    trash: int = 0
    by_channel: Dict[SalesChannel, int] = Field(default_factory=dict)
    revenue: float = 0.0
    cost: float = 0.0

    @property
    def margin(self) -> float:
        return self.revenue - self.cost


class DayTotals(BaseModel):
    """All products summed for one day."""
    date: str
    sold: int = 0
    prepared: int = 0
    used: int = 0
    trash: int = 0
    new: int = 0
    produced: int = 0
    staff_consumption: int = 0
    revenue: float = 0.0
    by_channel: Dict[SalesChannel, int] = Field(default_factory=dict)

    @property
    def waste_rate(self) -> float:
        """Trashed share of new production, in percent."""
        return (self.trash / self.new) * 100 if self.new > 0 else 0.0

    @property
    def efficiency(self) -> float:
        """Sold share of prepared units, in percent."""
        return (self.sold / self.prepared) * 100 if self.prepared > 0 else 0.0


class DashboardTotals(BaseModel):
    total_sold: int = 0
    total_stock: int = 0
    total_prepared: int = 0
    total_revenue: float = 0.0
    low_stock_count: int = 0


class CategoryTotals(BaseModel):
    category: str
    sold: int = 0
    revenue: float = 0.0


class SalesTrend(BaseModel):
    """Recent days vs. the days before them."""
    days: List[str] = Field(default_factory=list)
    recent_average: float = 0.0
    previous_average: float = 0.0
    percent_change: float = 0.0


# =============================================================================
# CSV import
# =============================================================================

class ColumnMapping(BaseModel):
    """Which CSV header feeds which import field."""
    date: str = ""
    product: str = ""
    channel: str = ""
    quantity: str = ""

    @property
    def is_complete(self) -> bool:
        return all([self.date, self.product, self.channel, self.quantity])


class ImportRow(BaseModel):
    """A CSV row after normalisation."""
    row_number: int
    date: str
    product_name: str
    channel_keyword: str
    channel: SalesChannel
    amount: int = Field(..., ge=0)


class MappingResult(BaseModel):
    rows: List[ImportRow] = Field(default_factory=list)
    invalid_rows: List[int] = Field(default_factory=list)


class ImportResult(BaseModel):
    """Outcome of applying mapped rows to the catalog."""
    updated: int = 0
    skipped: int = 0
    skipped_products: List[str] = Field(default_factory=list)
    invalid_rows: int = 0
    dates: List[str] = Field(default_factory=list)
    message: Optional[str] = None
