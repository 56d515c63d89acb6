"""SQLAlchemy ORM models for the Interview Organiser.

All models are imported here to ensure they're registered with Base.metadata
before any database operations.
"""

# Import base first
from organiser.config.database import Base

from .enums import (
    InterviewStatus,
    InterviewType,
    InterviewResult,
    CandidateStatus,
    FeedbackRecommendation,
    UserRole,
    VerificationStatus,
)

# Core models
from .organisations import Organisation
from .users import User, RefreshToken
from .candidates import Candidate
from .interviewers import Interviewer
from .interviews import Interview, interview_interviewers
from .feedback import Feedback

__all__ = [
    "Base",
    # Enums
    "InterviewStatus",
    "InterviewType",
    "InterviewResult",
    "CandidateStatus",
    "FeedbackRecommendation",
    "UserRole",
    "VerificationStatus",
    # Core
    "Organisation",
    "User",
    "RefreshToken",
    "Candidate",
    "Interviewer",
    "Interview",
    "interview_interviewers",
    "Feedback",
]
