"""Pydantic schemas for Interview endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from organiser.models.enums import InterviewStatus, InterviewType, InterviewResult

from .base import CamelModel, to_naive_utc


class ScheduleInterviewRequest(CamelModel):
    """Schema for scheduling a new interview."""

    candidate_id: int
    interviewer_ids: list[int] = Field(min_length=1)
    scheduled_at: datetime
    duration: Optional[int] = Field(None, gt=0)  # minutes
    interview_type: InterviewType
    round: int = Field(1, ge=1)
    recruiter_id: Optional[int] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def normalise_scheduled_at(cls, value):
        return to_naive_utc(value)


class UpdateInterviewRequest(CamelModel):
    """Schema for updating interview details (all fields optional)."""

    scheduled_at: Optional[datetime] = None
    duration: Optional[int] = Field(None, gt=0)
    interview_type: Optional[InterviewType] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    expected_version: Optional[int] = None

    @field_validator("scheduled_at")
    @classmethod
    def normalise_scheduled_at(cls, value):
        return to_naive_utc(value)


class UpdateInterviewStatusRequest(CamelModel):
    """Schema for an explicit status change."""

    status: InterviewStatus
    reason: Optional[str] = None
    expected_version: Optional[int] = None


class ConfirmInterviewRequest(CamelModel):
    """Candidate confirmation (or withdrawal of it)."""

    confirmed: bool
    notes: Optional[str] = None
    expected_version: Optional[int] = None


class MarkInterviewResultRequest(CamelModel):
    """Outcome of a completed interview.

    result is validated by the service so unknown values surface as
    INVALID_ARGUMENT rather than a schema error.
    """

    result: str
    comments: Optional[str] = None
    expected_version: Optional[int] = None


class CreateNextRoundRequest(CamelModel):
    """Schema for spawning the next round from an existing interview."""

    scheduled_at: datetime
    interview_type: InterviewType
    interviewer_ids: list[int] = Field(min_length=1)
    duration: Optional[int] = Field(None, gt=0)
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def normalise_scheduled_at(cls, value):
        return to_naive_utc(value)


class CandidateSummary(CamelModel):
    """Candidate as embedded in interview responses."""

    id: int
    first_name: str
    last_name: str
    email: str


class InterviewerSummary(CamelModel):
    """Interviewer as embedded in interview responses."""

    id: int
    name: str
    email: str
    department: Optional[str] = None


class InterviewListItem(CamelModel):
    """Schema for interview in list response."""

    id: int
    candidate_id: int
    candidate_name: str
    interviewer_ids: list[int]
    recruiter_id: Optional[int] = None
    scheduled_at: datetime
    duration: int
    interview_type: InterviewType
    round: int
    status: InterviewStatus
    candidate_confirmed: bool
    result: Optional[InterviewResult] = None


class InterviewResponse(CamelModel):
    """Schema for full interview response."""

    id: int
    recruiter_id: Optional[int] = None
    candidate: CandidateSummary
    interviewers: list[InterviewerSummary]
    scheduled_at: datetime
    duration: int
    interview_type: InterviewType
    round: int
    status: InterviewStatus
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    candidate_confirmed: bool
    candidate_confirmed_at: Optional[datetime] = None
    feedback_requested: bool
    feedback_requested_at: Optional[datetime] = None
    result: Optional[InterviewResult] = None
    next_round_interview_id: Optional[int] = None
    version: int
    created_at: datetime
    updated_at: datetime
