"""Pydantic schemas for Interviewer endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel


class InterviewerBase(CamelModel):
    """Base interviewer fields."""

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=255)
    department: Optional[str] = None
    expertise: list[str] = []
    years_of_experience: Optional[int] = Field(None, ge=0)


class InterviewerCreate(InterviewerBase):
    """Schema for creating an interviewer."""

    user_id: Optional[int] = None
    availability: bool = True


class InterviewerUpdate(CamelModel):
    """Schema for updating an interviewer (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    department: Optional[str] = None
    expertise: Optional[list[str]] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    availability: Optional[bool] = None
    user_id: Optional[int] = None


class InterviewerResponse(InterviewerBase):
    """Schema for interviewer response."""

    id: int
    user_id: Optional[int] = None
    availability: bool
    total_interviews: int
    created_at: datetime
    updated_at: datetime
