"""
User and Permission Models

Users log in with a shared numeric login code. A successful login yields
the user record with its fixed permission flags; there is no token.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from cookiecogs.models.common import utcnow


class UserRole(str, Enum):
    ADMIN = "admin"
    MITARBEITER = "mitarbeiter"


class UserPermissions(BaseModel):
    """Feature flags checked before each action."""

    # Dashboard & overview
    view_dashboard: bool = False
    view_stats: bool = False
    view_tagesinfo: bool = False

    # Products
    view_cookies: bool = False
    edit_cookies: bool = False
    add_cookies: bool = False
    delete_cookies: bool = False

    # Daily operations
    daily_tracking: bool = False
    production: bool = False

    # Inventory & stock
    view_inventory: bool = False
    edit_inventory: bool = False
    perform_inventory: bool = False
    view_inventory_log: bool = False

    # Ingredients
    view_ingredients: bool = False
    edit_ingredients: bool = False
    add_ingredients: bool = False
    delete_ingredients: bool = False

    # Planning & tasks
    view_todos: bool = False
    edit_todos: bool = False
    view_production_planning: bool = False
    edit_production_planning: bool = False

    # Recipes & settings
    view_recipes: bool = False
    edit_recipes: bool = False
    view_settings: bool = False
    edit_settings: bool = False

    manage_users: bool = False

    # Data & reports
    export_data: bool = False
    view_reports: bool = False

    # Shopping
    view_shopping_list: bool = False
    edit_shopping_list: bool = False

    @classmethod
    def admin(cls) -> "UserPermissions":
        return cls(**{name: True for name in cls.model_fields})

    @classmethod
    def employee(cls) -> "UserPermissions":
        return cls(
            view_dashboard=True,
            view_tagesinfo=True,
            view_cookies=True,
            daily_tracking=True,
            production=True,
            view_inventory=True,
            edit_inventory=True,
            perform_inventory=True,
            view_ingredients=True,
            edit_ingredients=True,
            view_todos=True,
            edit_todos=True,
            view_production_planning=True,
            view_recipes=True,
            view_shopping_list=True,
        )

    @classmethod
    def for_role(cls, role: UserRole) -> "UserPermissions":
        return cls.admin() if role == UserRole.ADMIN else cls.employee()


class User(BaseModel):
    id: int
    email: str
    login_code: str = Field(..., min_length=1)
    role: UserRole = UserRole.MITARBEITER
    name: str
    permissions: UserPermissions = Field(default_factory=UserPermissions.employee)
    created_at: datetime = Field(default_factory=utcnow)
    last_login: Optional[datetime] = None
    is_active: bool = True

    def can(self, permission: str) -> bool:
        return bool(getattr(self.permissions, permission, False))


class UserCreate(BaseModel):
    """Request model for creating a user."""
    email: str
    login_code: str = Field(..., min_length=1)
    role: UserRole = UserRole.MITARBEITER
    name: str
    permissions: Optional[UserPermissions] = None
    is_active: bool = True


class UserUpdate(BaseModel):
    email: Optional[str] = None
    login_code: Optional[str] = Field(default=None, min_length=1)
    role: Optional[UserRole] = None
    name: Optional[str] = None
    permissions: Optional[UserPermissions] = None
    is_active: Optional[bool] = None


class PublicUser(BaseModel):
    """User as returned to clients (no login code)."""
    id: int
    email: str
    role: UserRole
    name: str
    permissions: UserPermissions
    last_login: Optional[datetime] = None
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(**user.model_dump(exclude={"login_code", "created_at"}))
