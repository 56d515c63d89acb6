"""Closed value sets shared by models, schemas and services."""

from enum import Enum


class InterviewStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    RESCHEDULED = "RESCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class InterviewType(str, Enum):
    PHONE = "PHONE"
    VIDEO = "VIDEO"
    ONSITE = "ONSITE"
    TECHNICAL = "TECHNICAL"
    HR = "HR"
    MANAGERIAL = "MANAGERIAL"
    CODING = "CODING"
    BEHAVIORAL = "BEHAVIORAL"
    SYSTEM_DESIGN = "SYSTEM_DESIGN"


class InterviewResult(str, Enum):
    SELECTED = "SELECTED"
    REJECTED = "REJECTED"
    NEXT_ROUND = "NEXT_ROUND"


class CandidateStatus(str, Enum):
    APPLIED = "APPLIED"
    SCREENING = "SCREENING"
    INTERVIEWING = "INTERVIEWING"
    ON_HOLD = "ON_HOLD"
    SELECTED = "SELECTED"
    REJECTED = "REJECTED"


class FeedbackRecommendation(str, Enum):
    STRONG_HIRE = "STRONG_HIRE"
    HIRE = "HIRE"
    MAYBE = "MAYBE"
    NO_HIRE = "NO_HIRE"
    STRONG_NO_HIRE = "STRONG_NO_HIRE"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    ORG_ADMIN = "ORG_ADMIN"
    RECRUITER = "RECRUITER"
    INTERVIEWER = "INTERVIEWER"
    CANDIDATE = "CANDIDATE"


class VerificationStatus(str, Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"
