"""Interview feedback endpoints."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.config.settings import settings
from organiser.middleware.error_handler import AlreadyExistsError, ForbiddenError, NotFoundError
from organiser.models import Feedback, Interview, Interviewer, UserRole
from organiser.models.base import utcnow
from organiser.schemas.base import PaginatedResponse, paginate_meta
from organiser.schemas.feedback import FeedbackCreate, FeedbackUpdate, FeedbackResponse
from organiser.services.rbac import STAFF_ROLES, is_linked_user, is_staff, require_role

logger = structlog.get_logger()
router = APIRouter()

FEEDBACK_ROLES = STAFF_ROLES + [UserRole.INTERVIEWER.value]


def get_feedback_or_404(db: Session, feedback_id: int) -> Feedback:
    feedback = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not feedback:
        raise NotFoundError("Feedback", feedback_id)
    return feedback


def ensure_can_write_feedback(user: dict, interview: Interview) -> None:
    """Interviewers may only write feedback for interviews they are assigned to."""
    if is_staff(user):
        return
    if not is_linked_user(user, *(i.user_id for i in interview.interviewers)):
        logger.warning("Feedback write refused", interview_id=interview.id, user=user.get("sub"))
        raise ForbiddenError("You can only give feedback on interviews you conducted")


@router.get("", response_model=PaginatedResponse[FeedbackResponse])
async def list_feedback(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    interview_id: Optional[int] = Query(None),
    candidate_id: Optional[int] = Query(None),
    interviewer_id: Optional[int] = Query(None),
    user: dict = Depends(require_role(FEEDBACK_ROLES)),
):
    """List feedback with pagination."""
    query = db.query(Feedback).join(Interview, Feedback.interview_id == Interview.id)

    if interview_id:
        query = query.filter(Feedback.interview_id == interview_id)
    if candidate_id:
        query = query.filter(Interview.candidate_id == candidate_id)
    if interviewer_id:
        query = query.filter(Interview.interviewers.any(Interviewer.id == interviewer_id))

    total = query.count()
    items = (
        query.order_by(Feedback.submitted_at.desc(), Feedback.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    return PaginatedResponse(
        data=[FeedbackResponse.model_validate(f) for f in items],
        meta=paginate_meta(page, per_page, total),
    )


@router.get("/{feedback_id}", response_model=FeedbackResponse)
async def get_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(FEEDBACK_ROLES)),
):
    """Get feedback by ID."""
    return FeedbackResponse.model_validate(get_feedback_or_404(db, feedback_id))


@router.post("", response_model=FeedbackResponse, status_code=201)
async def submit_feedback(
    data: FeedbackCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(FEEDBACK_ROLES)),
):
    """Submit feedback for an interview. One record per interview."""
    interview = db.query(Interview).filter(Interview.id == data.interview_id).first()
    if not interview:
        raise NotFoundError("Interview", data.interview_id)
    ensure_can_write_feedback(user, interview)
    if db.query(Feedback.id).filter(Feedback.interview_id == data.interview_id).first():
        raise AlreadyExistsError("Feedback", "interview_id", data.interview_id)

    now = utcnow()
    feedback = Feedback(**data.model_dump(), submitted_at=now)
    db.add(feedback)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent submission
        db.rollback()
        raise AlreadyExistsError("Feedback", "interview_id", data.interview_id)
    db.refresh(feedback)

    logger.info(
        "Feedback submitted",
        id=feedback.id,
        interview_id=feedback.interview_id,
        rating=feedback.rating,
    )
    return FeedbackResponse.model_validate(feedback)


@router.put("/{feedback_id}", response_model=FeedbackResponse)
async def update_feedback(
    feedback_id: int,
    data: FeedbackUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(FEEDBACK_ROLES)),
):
    """Update feedback."""
    feedback = get_feedback_or_404(db, feedback_id)
    ensure_can_write_feedback(user, feedback.interview)

    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None and key == "rating":
            continue
        setattr(feedback, key, value)

    db.commit()
    db.refresh(feedback)

    logger.info("Feedback updated", id=feedback.id)
    return FeedbackResponse.model_validate(feedback)


@router.delete("/{feedback_id}", status_code=204)
async def delete_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Delete feedback."""
    feedback = get_feedback_or_404(db, feedback_id)

    db.delete(feedback)
    db.commit()

    logger.info("Feedback deleted", id=feedback_id)
