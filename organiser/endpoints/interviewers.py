"""Interviewer CRUD endpoints."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.config.settings import settings
from organiser.middleware.error_handler import AlreadyExistsError, ConflictError, NotFoundError
from organiser.models import Interviewer, User, UserRole, interview_interviewers
from organiser.schemas.base import PaginatedResponse, paginate_meta
from organiser.schemas.interviewers import (
    InterviewerCreate,
    InterviewerUpdate,
    InterviewerResponse,
)
from organiser.services.rbac import STAFF_ROLES, require_role

logger = structlog.get_logger()
router = APIRouter()

READ_ROLES = STAFF_ROLES + [UserRole.INTERVIEWER.value]


def get_interviewer_or_404(db: Session, interviewer_id: int) -> Interviewer:
    interviewer = db.query(Interviewer).filter(Interviewer.id == interviewer_id).first()
    if not interviewer:
        raise NotFoundError("Interviewer", interviewer_id)
    return interviewer


def ensure_user_exists(db: Session, user_id: Optional[int]) -> None:
    if user_id is not None and not db.query(User.id).filter(User.id == user_id).first():
        raise NotFoundError("User", user_id)


@router.get("", response_model=PaginatedResponse[InterviewerResponse])
async def list_interviewers(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    expertise: Optional[str] = Query(None),
    available: Optional[bool] = Query(None),
    user: dict = Depends(require_role(READ_ROLES)),
):
    """List interviewers with pagination.

    expertise matches case-insensitively against any listed skill.
    """
    query = db.query(Interviewer)

    if available is not None:
        query = query.filter(Interviewer.availability == available)

    interviewers = query.order_by(Interviewer.name, Interviewer.id).all()

    # expertise is a JSON list, so it is matched in Python
    if expertise:
        needle = expertise.lower()
        interviewers = [
            i for i in interviewers
            if any(needle == e.lower() for e in (i.expertise or []))
        ]

    total = len(interviewers)
    page_items = interviewers[(page - 1) * per_page: page * per_page]

    return PaginatedResponse(
        data=[InterviewerResponse.model_validate(i) for i in page_items],
        meta=paginate_meta(page, per_page, total),
    )


@router.get("/{interviewer_id}", response_model=InterviewerResponse)
async def get_interviewer(
    interviewer_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(READ_ROLES)),
):
    """Get an interviewer by ID."""
    return InterviewerResponse.model_validate(get_interviewer_or_404(db, interviewer_id))


@router.post("", response_model=InterviewerResponse, status_code=201)
async def create_interviewer(
    data: InterviewerCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Create a new interviewer."""
    email = data.email.strip().lower()
    if db.query(Interviewer).filter(Interviewer.email == email).first():
        raise AlreadyExistsError("Interviewer", "email", email)
    ensure_user_exists(db, data.user_id)

    interviewer = Interviewer(**data.model_dump(exclude={"email"}), email=email)
    db.add(interviewer)
    db.commit()
    db.refresh(interviewer)

    logger.info("Interviewer created", id=interviewer.id, name=interviewer.name)
    return InterviewerResponse.model_validate(interviewer)


@router.put("/{interviewer_id}", response_model=InterviewerResponse)
async def update_interviewer(
    interviewer_id: int,
    data: InterviewerUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Update an interviewer."""
    interviewer = get_interviewer_or_404(db, interviewer_id)

    update_data = data.model_dump(exclude_unset=True)
    if "user_id" in update_data:
        ensure_user_exists(db, update_data["user_id"])
    for key, value in update_data.items():
        if value is None and key in ("name", "expertise", "availability"):
            continue
        setattr(interviewer, key, value)

    db.commit()
    db.refresh(interviewer)

    logger.info("Interviewer updated", id=interviewer.id)
    return InterviewerResponse.model_validate(interviewer)


@router.delete("/{interviewer_id}", status_code=204)
async def delete_interviewer(
    interviewer_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Delete an interviewer who is not assigned to any interview."""
    interviewer = get_interviewer_or_404(db, interviewer_id)

    assigned = (
        db.query(interview_interviewers.c.interview_id)
        .filter(interview_interviewers.c.interviewer_id == interviewer_id)
        .first()
    )
    if assigned:
        raise ConflictError(
            f"Interviewer {interviewer_id} is assigned to interviews and cannot be deleted",
            details={"interviewer_id": interviewer_id},
        )

    db.delete(interviewer)
    db.commit()

    logger.info("Interviewer deleted", id=interviewer_id)
