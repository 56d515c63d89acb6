"""Pydantic schemas for dashboard endpoints."""

from datetime import datetime
from typing import Optional

from organiser.models.enums import InterviewStatus, InterviewType

from .base import CamelModel


class UpcomingInterview(CamelModel):
    id: int
    candidate_id: int
    scheduled_at: datetime
    interview_type: InterviewType
    round: int
    status: InterviewStatus


class AdminDashboard(CamelModel):
    """System-wide counts."""

    total_organisations: int
    pending_organisations: int
    total_users: int
    total_candidates: int
    total_interviewers: int
    total_interviews: int
    interviews_by_status: dict[str, int]


class RecruiterDashboard(CamelModel):
    recruiter_id: int
    total_candidates: int
    candidates_by_status: dict[str, int]
    total_interviews: int
    interviews_by_status: dict[str, int]
    upcoming_interviews: list[UpcomingInterview]


class InterviewerDashboard(CamelModel):
    """Interviewer workload.

    total_interviews is the stored counter; assigned_interviews is counted
    from the interview table at query time.
    """

    interviewer_id: int
    total_interviews: int
    assigned_interviews: int
    completed_interviews: int
    pending_feedback: int
    upcoming_interviews: list[UpcomingInterview]


class CandidateDashboard(CamelModel):
    candidate_id: int
    status: str
    total_interviews: int
    current_round: Optional[int] = None
    interviews_by_status: dict[str, int]
    upcoming_interviews: list[UpcomingInterview]
