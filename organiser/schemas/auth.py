"""Pydantic schemas for authentication."""

from typing import Optional

from pydantic import Field

from organiser.models.enums import UserRole

from .base import CamelModel


class RegisterRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = None
    roles: list[UserRole] = Field(default_factory=lambda: [UserRole.CANDIDATE], min_length=1)
    recruiter_id: Optional[int] = None


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class TokenResponse(CamelModel):
    """Issued token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds

