"""
Catalog Data Models

Products (cookies), their per-day history, ingredients and recipes.
Counters that describe physical quantities never go below zero: the
validators clamp instead of rejecting, on construction and on assignment.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from cookiecogs.models.common import SalesChannel, today_iso


def _clamp(v):
    if v is None:
        return 0
    return max(0, v)


class DailyRecord(BaseModel):
    """
    One product's numbers for one calendar day.

    `sold` is derived from the channel fields. Records written before the
    channel split only carry an aggregate, kept in `legacy_sold` until the
    first channel write replaces it.
    """

    # Revenue channels
    verkauft_location: int = 0
    verkauft_ubereats: int = 0
    verkauft_wolt: int = 0
    verkauft_lieferando: int = 0
    verkauft_website: int = 0

    # Non-revenue consumption
    mitarbeiter_verbrauch: int = 0

    # Production / waste
    prepared: int = 0
    used: int = 0
    trash: int = 0
    new: int = 0
    produziert: int = 0

    # Counted stock on audit day
    inventur: Optional[int] = None

    legacy_sold: int = 0

    class Config:
        validate_assignment = True

    @field_validator(
        "verkauft_location", "verkauft_ubereats", "verkauft_wolt",
        "verkauft_lieferando", "verkauft_website", "mitarbeiter_verbrauch",
        "prepared", "used", "trash", "new", "produziert", "legacy_sold",
        mode="before",
    )
    @classmethod
    def clamp_counts(cls, v):
        return _clamp(v)

    @property
    def channel_total(self) -> int:
        return sum(getattr(self, c.value) for c in SalesChannel.revenue_channels())

    @property
    def sold(self) -> int:
        return self.channel_total + self.legacy_sold

    def get_channel(self, channel: SalesChannel) -> int:
        return getattr(self, channel.value)

    def set_channel(self, channel: SalesChannel, value: int):
        """Multi-channel write; drops any legacy aggregate."""
        setattr(self, channel.value, value)
        self.legacy_sold = 0


class Product(BaseModel):
    """A cookie in the catalog."""

    id: int
    name: str
    category: str = "Classic"
    price: float = Field(default=2.50, ge=0, description="Sales price per unit")
    production_price: float = Field(default=0.70, ge=0, description="Material cost per unit")

    stock: int = 0
    prepared: int = 0
    target_stock: Optional[int] = Field(default=None, description="SOLL baseline from the last audit")

    history: Dict[str, DailyRecord] = Field(default_factory=dict)

    class Config:
        validate_assignment = True

    @field_validator("stock", "prepared", mode="before")
    @classmethod
    def clamp_counters(cls, v):
        return _clamp(v)

    @property
    def sold(self) -> int:
        """Lifetime units sold."""
        return sum(r.sold for r in self.history.values())

    def record_for(self, day: Optional[str] = None) -> DailyRecord:
        """Return the record for a day, creating it on first use."""
        day = day or today_iso()
        record = self.history.get(day)
        if record is None:
            record = DailyRecord()
            self.history[day] = record
        return record

    def peek_record(self, day: str) -> DailyRecord:
        """Record for a day without creating it."""
        return self.history.get(day) or DailyRecord()


class Ingredient(BaseModel):
    """A raw ingredient held in stock."""

    id: int
    name: str
    amount: float = 0.0
    unit: str
    min_stock: float = Field(default=1.0, ge=0)
    cost_per_unit: float = Field(default=0.0, ge=0)
    supplier: str = "Unbekannt"
    last_updated: str = Field(default_factory=today_iso)

    class Config:
        validate_assignment = True

    @field_validator("amount", mode="before")
    @classmethod
    def clamp_amount(cls, v):
        return _clamp(v)

    @property
    def stock_value(self) -> float:
        return self.amount * self.cost_per_unit


class Recipe(BaseModel):
    """Ingredient quantities for one batch of a product."""

    product_id: int
    ingredients: Dict[int, float] = Field(default_factory=dict)
    batch_yield: int = Field(default=100, ge=0, description="Units produced per batch")
    notes: str = ""

    def scale(self, quantity: float) -> Dict[int, float]:
        """Ingredient amounts needed for `quantity` finished units."""
        if self.batch_yield <= 0:
            return {ing_id: 0.0 for ing_id in self.ingredients}
        multiplier = quantity / self.batch_yield
        return {ing_id: qty * multiplier for ing_id, qty in self.ingredients.items()}
