"""Production cost, margin and ingredient requirement models."""

from typing import List, Optional

from pydantic import BaseModel, Field


class CostBreakdown(BaseModel):
    """Per-unit cost and margin for one production run."""

    quantity: int
    hours: float
    material_cost_per_unit: float
    labor_cost_per_unit: float
    total_cost_per_unit: float
    sales_price: float
    margin: float
    margin_percent: float
    units_per_minute: float = 0.0
    total_production_cost: float = 0.0
    total_revenue: float = 0.0
    total_profit: float = 0.0

    # Warnings never block saving
    negative_margin: bool = False
    low_margin: bool = False


class IngredientRequirement(BaseModel):
    """How much of one ingredient a production run needs."""
    ingredient_id: int
    name: str
    unit: str
    required: float
    available: float

    @property
    def sufficient(self) -> bool:
        return self.available >= self.required

    @property
    def shortfall(self) -> float:
        return max(0.0, self.required - self.available)


class RecipeCost(BaseModel):
    """Batch and unit cost of a recipe."""
    product_id: int
    product_name: str
    category: str
    batch_yield: int
    batch_cost: float
    cost_per_unit: float
    notes: str = ""


class ProductionResult(BaseModel):
    """What a production entry changed."""
    product_id: int
    day: str
    previous_total: int
    new_total: int
    delta: int
    prepared: int
    consumed: List[IngredientRequirement] = Field(default_factory=list)
    shortfalls: List[IngredientRequirement] = Field(default_factory=list)


class IngredientUsage(BaseModel):
    ingredient_id: int
    name: str
    unit: str
    used: float


class ShoppingListEntry(BaseModel):
    ingredient_id: int
    name: str
    amount: float
    unit: str
    min_stock: float
    recommended_order: float
    cost_per_unit: float
    supplier: str
    estimated_cost: float
    urgency: float


class ShoppingList(BaseModel):
    entries: List[ShoppingListEntry] = Field(default_factory=list)
    total_estimated_cost: float = 0.0
    generated_for: Optional[str] = None
