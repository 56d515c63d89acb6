"""Pydantic schemas for Feedback endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from organiser.models.enums import FeedbackRecommendation

from .base import CamelModel


class FeedbackBase(CamelModel):
    """Base feedback fields. Scores run from 1 to 5."""

    rating: int = Field(ge=1, le=5)
    technical_skills: Optional[int] = Field(None, ge=1, le=5)
    communication_skills: Optional[int] = Field(None, ge=1, le=5)
    problem_solving: Optional[int] = Field(None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(None, ge=1, le=5)
    comments: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    recommendation: Optional[FeedbackRecommendation] = None


class FeedbackCreate(FeedbackBase):
    """Schema for submitting feedback for an interview."""

    interview_id: int


class FeedbackUpdate(CamelModel):
    """Schema for updating feedback (all fields optional)."""

    rating: Optional[int] = Field(None, ge=1, le=5)
    technical_skills: Optional[int] = Field(None, ge=1, le=5)
    communication_skills: Optional[int] = Field(None, ge=1, le=5)
    problem_solving: Optional[int] = Field(None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(None, ge=1, le=5)
    comments: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    recommendation: Optional[FeedbackRecommendation] = None


class FeedbackResponse(FeedbackBase):
    """Schema for feedback response."""

    id: int
    interview_id: int
    submitted_at: datetime
    created_at: datetime
    updated_at: datetime
