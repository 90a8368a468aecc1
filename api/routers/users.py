"""User management endpoints (admin)."""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_auth_service
from api.middleware.auth import require_permission
from cookiecogs.models import PublicUser, UserCreate, UserPermissions, UserRole, UserUpdate
from cookiecogs.services import AuthService

router = APIRouter(dependencies=[Depends(require_permission("manage_users"))])


@router.get("", response_model=List[PublicUser])
async def list_users(service: AuthService = Depends(get_auth_service)):
    return [PublicUser.from_user(u) for u in service.list_users()]


@router.get("/roles/{role}/permissions", response_model=UserPermissions)
async def role_permissions(role: UserRole):
    """Permission preset applied to new users of a role."""
    return UserPermissions.for_role(role)


@router.get("/{user_id}", response_model=PublicUser)
async def get_user(user_id: int, service: AuthService = Depends(get_auth_service)):
    return PublicUser.from_user(service.get_user(user_id))


@router.post("", response_model=PublicUser, status_code=201)
async def create_user(data: UserCreate, service: AuthService = Depends(get_auth_service)):
    return PublicUser.from_user(service.create_user(data))


@router.patch("/{user_id}", response_model=PublicUser)
async def update_user(
    user_id: int,
    data: UserUpdate,
    service: AuthService = Depends(get_auth_service),
):
    return PublicUser.from_user(service.update_user(user_id, data))


@router.delete("/{user_id}")
async def delete_user(user_id: int, service: AuthService = Depends(get_auth_service)):
    service.delete_user(user_id)
    return {"deleted": user_id}
