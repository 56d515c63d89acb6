"""Interview lifecycle endpoints."""

from datetime import datetime
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.config.settings import settings
from organiser.middleware.error_handler import ForbiddenError
from organiser.models import Interview, InterviewStatus, UserRole
from organiser.schemas.base import (
    ErrorResponse,
    PaginatedResponse,
    paginate_meta,
    to_naive_utc,
)
from organiser.schemas.interviews import (
    ConfirmInterviewRequest,
    CreateNextRoundRequest,
    InterviewListItem,
    InterviewResponse,
    MarkInterviewResultRequest,
    ScheduleInterviewRequest,
    UpdateInterviewRequest,
    UpdateInterviewStatusRequest,
)
from organiser.services.interview_service import InterviewService
from organiser.services.notifications import NotificationService, get_notification_service
from organiser.services.rbac import STAFF_ROLES, is_linked_user, is_staff, require_role

logger = structlog.get_logger()
router = APIRouter(
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)

READ_ROLES = STAFF_ROLES + [UserRole.INTERVIEWER.value]
CONFIRM_ROLES = STAFF_ROLES + [UserRole.CANDIDATE.value]


def get_interview_service(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
) -> InterviewService:
    return InterviewService(db, notifier=notifier)


def to_list_item(interview: Interview) -> InterviewListItem:
    return InterviewListItem(
        id=interview.id,
        candidate_id=interview.candidate_id,
        candidate_name=interview.candidate.full_name if interview.candidate else "",
        interviewer_ids=[i.id for i in interview.interviewers],
        recruiter_id=interview.recruiter_id,
        scheduled_at=interview.scheduled_at,
        duration=interview.duration,
        interview_type=interview.interview_type,
        round=interview.round,
        status=interview.status,
        candidate_confirmed=interview.candidate_confirmed,
        result=interview.result,
    )


@router.get("", response_model=PaginatedResponse[InterviewListItem])
async def list_interviews(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[InterviewStatus] = Query(None),
    candidate_id: Optional[int] = Query(None),
    interviewer_id: Optional[int] = Query(None),
    recruiter_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(READ_ROLES)),
):
    """List interviews with filters, most recent slot first."""
    interviews, total = service.list_interviews(
        page=page,
        per_page=per_page,
        status=status,
        candidate_id=candidate_id,
        interviewer_id=interviewer_id,
        recruiter_id=recruiter_id,
        date_from=to_naive_utc(date_from),
        date_to=to_naive_utc(date_to),
    )

    return PaginatedResponse(
        data=[to_list_item(i) for i in interviews],
        meta=paginate_meta(page, per_page, total),
    )


@router.post("", response_model=InterviewResponse, status_code=201)
async def schedule_interview(
    data: ScheduleInterviewRequest,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Schedule a new interview."""
    interview = service.schedule_interview(data)
    return InterviewResponse.model_validate(interview)


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: int,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(READ_ROLES)),
):
    """Get an interview by ID."""
    return InterviewResponse.model_validate(service.get_interview(interview_id))


@router.put("/{interview_id}", response_model=InterviewResponse)
async def update_interview(
    interview_id: int,
    data: UpdateInterviewRequest,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Update slot details. Notes are appended, status is unchanged."""
    interview = service.update_interview(interview_id, data)
    return InterviewResponse.model_validate(interview)


@router.patch("/{interview_id}/status", response_model=InterviewResponse)
async def update_interview_status(
    interview_id: int,
    data: UpdateInterviewStatusRequest,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Change the interview status."""
    interview = service.update_status(interview_id, data)
    return InterviewResponse.model_validate(interview)


@router.post("/{interview_id}/confirm", response_model=InterviewResponse)
async def confirm_interview(
    interview_id: int,
    data: ConfirmInterviewRequest,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(CONFIRM_ROLES)),
):
    """Record candidate confirmation.

    Staff may confirm any interview; a CANDIDATE user only one whose
    candidate record is linked to their account.
    """
    interview = service.get_interview(interview_id)
    if not is_staff(user) and not is_linked_user(user, interview.candidate.user_id):
        logger.warning(
            "Confirmation refused",
            interview_id=interview_id,
            user=user.get("sub"),
        )
        raise ForbiddenError("You can only confirm your own interviews")

    interview = service.confirm_interview(interview_id, data)
    return InterviewResponse.model_validate(interview)


@router.post(
    "/{interview_id}/result",
    response_model=InterviewResponse,
    responses={400: {"model": ErrorResponse}},
)
async def mark_interview_result(
    interview_id: int,
    data: MarkInterviewResultRequest,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Mark the outcome (SELECTED, REJECTED or NEXT_ROUND) and complete the interview."""
    interview = service.mark_result(interview_id, data)
    return InterviewResponse.model_validate(interview)


@router.post("/{interview_id}/next-round", response_model=InterviewResponse, status_code=201)
async def create_next_round(
    interview_id: int,
    data: CreateNextRoundRequest,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Schedule the next round for the same candidate."""
    interview = service.create_next_round(interview_id, data)
    return InterviewResponse.model_validate(interview)


@router.post("/{interview_id}/request-feedback", response_model=InterviewResponse)
async def request_feedback(
    interview_id: int,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Ask interviewers (and, optionally, the candidate) for feedback."""
    interview = service.request_feedback(interview_id)
    return InterviewResponse.model_validate(interview)


@router.delete("/{interview_id}", response_model=InterviewResponse)
async def cancel_interview(
    interview_id: int,
    service: InterviewService = Depends(get_interview_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Cancel an interview. The record is kept with status CANCELLED."""
    interview = service.cancel_interview(interview_id)
    return InterviewResponse.model_validate(interview)
