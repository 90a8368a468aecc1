"""
Auth Service

Login-code authentication and user management. A login returns the user
record itself; permissions are checked per action with `has_permission`.
"""

import logging
import secrets
from typing import List, Optional

from cookiecogs.models import User, UserCreate, UserPermissions, UserRole, UserUpdate
from cookiecogs.models.common import utcnow
from cookiecogs.services.errors import NotFoundError, ValidationError
from cookiecogs.services.state import USERS, AppState, next_id

logger = logging.getLogger(__name__)


class AuthService:
    """
    Handles:
    - Login by numeric code
    - User CRUD
    - Permission checks
    """

    def __init__(self, state: AppState):
        self.state = state

    # =========================================================================
    # Login
    # =========================================================================

    def authenticate(self, code: str, touch: bool = True) -> Optional[User]:
        """
        Return the active user owning `code`, or None.

        A match stamps last_login unless `touch` is False.
        """
        code = (code or "").strip()
        if not code:
            return None

        with self.state.lock:
            for user in self.state.users:
                if not user.is_active:
                    continue
                if secrets.compare_digest(user.login_code.encode(), code.encode()):
                    if touch:
                        user.last_login = utcnow()
                        self.state.commit(USERS)
                        logger.info(f"User {user.id} logged in")
                    return user

        logger.warning("Login attempt with unknown code")
        return None

    @staticmethod
    def has_permission(user: Optional[User], permission: str) -> bool:
        if user is None or not user.is_active:
            return False
        return user.can(permission)

    # =========================================================================
    # Users
    # =========================================================================

    def list_users(self) -> List[User]:
        return list(self.state.users)

    def get_user(self, user_id: int) -> User:
        for user in self.state.users:
            if user.id == user_id:
                return user
        raise NotFoundError("User", user_id)

    def _check_unique(self, email: str, login_code: str, exclude_id: Optional[int] = None):
        for user in self.state.users:
            if user.id == exclude_id:
                continue
            if user.email.lower() == email.lower():
                raise ValidationError(f"Email already in use: {email}")
            if user.login_code == login_code:
                raise ValidationError("Login code already in use")

    def _active_admins(self) -> List[User]:
        return [u for u in self.state.users if u.is_active and u.role == UserRole.ADMIN]

    def create_user(self, data: UserCreate) -> User:
        """Create a user; permissions default to the role's preset."""
        with self.state.lock:
            self._check_unique(data.email, data.login_code)
            user = User(
                id=next_id(self.state.users),
                email=data.email.strip(),
                login_code=data.login_code.strip(),
                role=data.role,
                name=data.name.strip(),
                permissions=data.permissions or UserPermissions.for_role(data.role),
                is_active=data.is_active,
            )
            self.state.users.append(user)
            logger.info(f"Created user {user.id} ({user.role.value})")
            self.state.commit(USERS)
            return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """
        Apply the set fields of `data`.

        A role change without explicit permissions resets them to the new
        role's preset. The last active admin cannot be demoted or
        deactivated.
        """
        with self.state.lock:
            user = self.get_user(user_id)
            changes = data.model_dump(exclude_unset=True, exclude_none=True)

            is_last_admin = user in self._active_admins() and len(self._active_admins()) == 1
            if is_last_admin and (
                changes.get("role", UserRole.ADMIN) != UserRole.ADMIN
                or changes.get("is_active", True) is False
            ):
                raise ValidationError("Cannot demote or deactivate the last active admin")

            self._check_unique(
                changes.get("email", user.email),
                changes.get("login_code", user.login_code),
                exclude_id=user.id,
            )

            if "role" in changes and data.permissions is None:
                user.permissions = UserPermissions.for_role(data.role)
            if data.permissions is not None:
                user.permissions = data.permissions
            for field in ("email", "login_code", "role", "name", "is_active"):
                if field in changes:
                    setattr(user, field, getattr(data, field))

            logger.info(f"Updated user {user.id}")
            self.state.commit(USERS)
            return user

    def delete_user(self, user_id: int):
        with self.state.lock:
            user = self.get_user(user_id)
            if user in self._active_admins() and len(self._active_admins()) == 1:
                raise ValidationError("Cannot delete the last active admin")

            self.state.users = [u for u in self.state.users if u.id != user_id]
            logger.info(f"Deleted user {user_id}")
            self.state.commit(USERS)
