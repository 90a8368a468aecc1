"""Business settings edited from the dashboard."""

from typing import Optional

from pydantic import BaseModel, Field


class CostSettings(BaseModel):
    cost_per_cookie: float = Field(default=0.70, ge=0)
    cost_per_hour: float = Field(default=60.0, ge=0, description="Labor cost per hour")


class WebsiteSettings(BaseModel):
    company_name: str = "Cookie Business"
    logo: Optional[str] = None
    background_color: str = "#fef3c7"
    text_color: str = "#1f2937"
    button_bg_color: str = "#f59e0b"
