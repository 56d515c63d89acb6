"""Pydantic schemas for Organisation (recruiter) endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from organiser.models.enums import VerificationStatus

from .base import CamelModel


class OrganisationBase(CamelModel):
    """Base organisation fields."""

    name: str = Field(min_length=1, max_length=200)
    registration_number: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    contact_email: str = Field(min_length=3, max_length=255)
    contact_phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None


class OrganisationCreate(OrganisationBase):
    """Schema for registering an organisation. Starts PENDING and inactive."""

    admin_user_id: Optional[int] = None


class OrganisationUpdate(CamelModel):
    """Schema for updating an organisation (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    registration_number: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    contact_phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    admin_user_id: Optional[int] = None


class OrganisationResponse(OrganisationBase):
    """Schema for organisation response."""

    id: int
    verification_status: VerificationStatus
    rejection_reason: Optional[str] = None
    admin_user_id: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class OrganisationListItem(CamelModel):
    """Schema for organisation in list response."""

    id: int
    name: str
    contact_email: str
    verification_status: VerificationStatus
    is_active: bool
    candidate_count: int = 0
    interview_count: int = 0
