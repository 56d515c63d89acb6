"""Pydantic schemas for API request/response validation.

All schemas use CamelCase for JSON field names (via alias_generator).
"""

from .base import (
    CamelModel,
    PaginatedResponse,
    PaginationMeta,
    MessageResponse,
    ErrorResponse,
    paginate_meta,
)

# Re-export all schemas
from .interviews import (
    ScheduleInterviewRequest,
    UpdateInterviewRequest,
    UpdateInterviewStatusRequest,
    ConfirmInterviewRequest,
    MarkInterviewResultRequest,
    CreateNextRoundRequest,
    InterviewResponse,
    InterviewListItem,
)
from .candidates import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListItem,
)
from .interviewers import InterviewerCreate, InterviewerUpdate, InterviewerResponse
from .organisations import (
    OrganisationCreate,
    OrganisationUpdate,
    OrganisationResponse,
    OrganisationListItem,
)
from .users import UserResponse, UserUpdate
from .feedback import FeedbackCreate, FeedbackUpdate, FeedbackResponse
from .auth import RegisterRequest, LoginRequest, RefreshRequest, TokenResponse
from .dashboard import (
    AdminDashboard,
    RecruiterDashboard,
    InterviewerDashboard,
    CandidateDashboard,
)

__all__ = [
    "CamelModel",
    "PaginatedResponse",
    "PaginationMeta",
    "MessageResponse",
    "ErrorResponse",
    "paginate_meta",
    "ScheduleInterviewRequest",
    "UpdateInterviewRequest",
    "UpdateInterviewStatusRequest",
    "ConfirmInterviewRequest",
    "MarkInterviewResultRequest",
    "CreateNextRoundRequest",
    "InterviewResponse",
    "InterviewListItem",
    "CandidateCreate",
    "CandidateUpdate",
    "CandidateResponse",
    "CandidateListItem",
    "InterviewerCreate",
    "InterviewerUpdate",
    "InterviewerResponse",
    "OrganisationCreate",
    "OrganisationUpdate",
    "OrganisationResponse",
    "OrganisationListItem",
    "UserResponse",
    "UserUpdate",
    "FeedbackCreate",
    "FeedbackUpdate",
    "FeedbackResponse",
    "RegisterRequest",
    "LoginRequest",
    "RefreshRequest",
    "TokenResponse",
    "AdminDashboard",
    "RecruiterDashboard",
    "InterviewerDashboard",
    "CandidateDashboard",
]
