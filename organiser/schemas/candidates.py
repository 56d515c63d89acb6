"""Pydantic schemas for Candidate endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from organiser.models.enums import CandidateStatus

from .base import CamelModel


class CandidateBase(CamelModel):
    """Base candidate fields."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    phone: Optional[str] = None
    position: Optional[str] = None
    experience: Optional[float] = Field(None, ge=0)  # years
    skills: list[str] = []
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None


class CandidateCreate(CandidateBase):
    """Schema for creating a candidate."""

    recruiter_id: Optional[int] = None
    user_id: Optional[int] = None


class CandidateUpdate(CamelModel):
    """Schema for updating a candidate (all fields optional)."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    position: Optional[str] = None
    experience: Optional[float] = Field(None, ge=0)
    skills: Optional[list[str]] = None
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    status: Optional[CandidateStatus] = None
    recruiter_id: Optional[int] = None
    user_id: Optional[int] = None


class CandidateResponse(CandidateBase):
    """Schema for candidate response."""

    id: int
    status: CandidateStatus
    recruiter_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class CandidateListItem(CamelModel):
    """Schema for candidate in list response."""

    id: int
    first_name: str
    last_name: str
    email: str
    position: Optional[str] = None
    status: CandidateStatus
    interview_count: int = 0
