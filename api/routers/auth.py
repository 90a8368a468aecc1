"""Login endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.dependencies import get_auth_service
from api.middleware.auth import get_current_user
from api.middleware.errors import AuthenticationError
from cookiecogs.models import PublicUser, User
from cookiecogs.services import AuthService

router = APIRouter()


class LoginRequest(BaseModel):
    code: str = Field(..., min_length=1, description="Numeric login code")


@router.post("/login", response_model=PublicUser)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange a login code for the user record and its permissions."""
    user = service.authenticate(request.code)
    if user is None:
        raise AuthenticationError("INVALID_LOGIN_CODE", "Invalid login code.")
    return PublicUser.from_user(user)


@router.get("/me", response_model=PublicUser)
async def current_user(user: User = Depends(get_current_user)):
    return PublicUser.from_user(user)
