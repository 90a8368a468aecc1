"""
Authentication Middleware

Login-code validation and permission checks for protected endpoints.
"""

import logging
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader

from api.config import get_settings
from api.dependencies import get_state
from api.middleware.errors import AuthenticationError, PermissionDeniedError
from cookiecogs.models import User, UserPermissions, UserRole
from cookiecogs.services import AppState, AuthService

logger = logging.getLogger("cookiecogs.api")

login_code_header = APIKeyHeader(name="X-Login-Code", auto_error=False)

DEBUG_ADMIN = User(
    id=0,
    email="debug@localhost",
    login_code="debug",
    role=UserRole.ADMIN,
    name="Debug Admin",
    permissions=UserPermissions.admin(),
)


async def get_current_user(
    login_code: Optional[str] = Security(login_code_header),
    state: AppState = Depends(get_state),
) -> User:
    """
    Resolve the X-Login-Code header to an active user.

    In debug mode with auth disabled, a built-in admin is returned.
    """
    settings = get_settings()
    if settings.debug and settings.auth_disabled:
        return DEBUG_ADMIN

    if not login_code:
        raise AuthenticationError("AUTH_REQUIRED", "Login code required. Include X-Login-Code header.")

    user = AuthService(state).authenticate(login_code, touch=False)
    if user is None:
        raise AuthenticationError("INVALID_LOGIN_CODE", "Invalid login code.")
    return user


def require_permission(permission: str):
    """Dependency factory: the current user must hold `permission`."""

    async def checker(user: User = Depends(get_current_user)) -> User:
        if not AuthService.has_permission(user, permission):
            logger.warning(f"User {user.id} denied '{permission}'")
            raise PermissionDeniedError(permission)
        return user

    return checker
