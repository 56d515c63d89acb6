"""Pydantic schemas for User endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from organiser.models.enums import UserRole

from .base import CamelModel


class UserResponse(CamelModel):
    """Schema for user response. Never carries the password hash."""

    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    roles: list[UserRole]
    recruiter_id: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserUpdate(CamelModel):
    """Schema for updating a user (all fields optional)."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    roles: Optional[list[UserRole]] = Field(None, min_length=1)
    recruiter_id: Optional[int] = None
    is_active: Optional[bool] = None
