"""Tests for login-code authentication and user management."""

import pytest

from cookiecogs.models import UserCreate, UserPermissions, UserRole, UserUpdate
from cookiecogs.services.errors import NotFoundError, ValidationError


@pytest.fixture
def employee(auth):
    return auth.create_user(UserCreate(email="anna@cookie.com", login_code="4711", name="Anna"))


def test_authenticate_admin(auth, store):
    user = auth.authenticate("12345")

    assert user.role == UserRole.ADMIN
    assert user.last_login is not None
    assert store.load("users")[0]["last_login"] is not None


def test_authenticate_without_touch(auth):
    user = auth.authenticate("12345", touch=False)

    assert user is not None
    assert user.last_login is None


def test_authenticate_unknown_code(auth):
    assert auth.authenticate("00000") is None
    assert auth.authenticate("") is None


def test_inactive_user_cannot_log_in(auth, employee):
    auth.update_user(employee.id, UserUpdate(is_active=False))

    assert auth.authenticate("4711") is None


def test_new_user_gets_role_preset(employee):
    assert employee.id == 2
    assert employee.permissions == UserPermissions.employee()


def test_create_user_rejects_duplicates(auth, employee):
    with pytest.raises(ValidationError):
        auth.create_user(UserCreate(email="ANNA@cookie.com", login_code="1", name="Other"))
    with pytest.raises(ValidationError):
        auth.create_user(UserCreate(email="b@cookie.com", login_code="4711", name="Other"))


def test_has_permission(auth, employee):
    assert auth.has_permission(employee, "perform_inventory")
    assert not auth.has_permission(employee, "manage_users")
    assert not auth.has_permission(None, "view_dashboard")


def test_promote_resets_permissions_to_role_preset(auth, employee):
    user = auth.update_user(employee.id, UserUpdate(role=UserRole.ADMIN))

    assert user.permissions.manage_users


def test_explicit_permissions_win(auth, employee):
    custom = UserPermissions(view_dashboard=True)
    user = auth.update_user(employee.id, UserUpdate(permissions=custom, name="Anna B."))

    assert user.permissions == custom
    assert user.name == "Anna B."


def test_last_admin_is_protected(auth):
    with pytest.raises(ValidationError):
        auth.delete_user(1)
    with pytest.raises(ValidationError):
        auth.update_user(1, UserUpdate(role=UserRole.MITARBEITER))
    with pytest.raises(ValidationError):
        auth.update_user(1, UserUpdate(is_active=False))


def test_admin_can_be_deleted_when_another_exists(auth):
    auth.create_user(UserCreate(email="boss@cookie.com", login_code="999", name="Boss", role=UserRole.ADMIN))

    auth.delete_user(1)

    assert [u.id for u in auth.list_users()] == [2]


def test_get_unknown_user(auth):
    with pytest.raises(NotFoundError):
        auth.get_user(42)
