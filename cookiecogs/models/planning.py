"""Task and production planning models."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from cookiecogs.models.common import Priority, priority_for, tomorrow, utcnow


class Todo(BaseModel):
    id: int
    text: str = Field(..., min_length=1)
    due_date: date = Field(default_factory=tomorrow)
    info: str = ""
    done: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def priority(self) -> Priority:
        return priority_for(self.due_date, self.done)


class ProductionPlan(BaseModel):
    id: int
    product: str = Field(..., description="Product name")
    quantity: int = Field(..., gt=0)
    deadline: date = Field(default_factory=tomorrow)
    note: str = ""
    done: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def priority(self) -> Priority:
        return priority_for(self.deadline, self.done)
