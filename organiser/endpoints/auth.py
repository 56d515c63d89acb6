"""Authentication endpoints: registration, password login and token refresh."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.middleware.error_handler import NotFoundError
from organiser.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest, TokenResponse
from organiser.schemas.base import MessageResponse
from organiser.schemas.users import UserResponse
from organiser.services.auth_service import AuthService
from organiser.services.rbac import get_current_user

logger = structlog.get_logger()
router = APIRouter()


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    data: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Create an account."""
    user = auth.register(data)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange email and password for an access/refresh token pair."""
    return auth.login(data.email, data.password)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    data: RefreshRequest,
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Rotate a refresh token."""
    return auth.refresh(data.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user: dict = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Revoke the caller's refresh tokens."""
    auth.logout(int(user["sub"]))
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(
    user: dict = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Get current user profile.

    Requires valid access token.
    """
    account = auth.get_user(int(user["sub"]))
    if not account:
        raise NotFoundError("User", user["sub"])
    return UserResponse.model_validate(account)
