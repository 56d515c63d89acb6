"""Candidate CRUD endpoints."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.config.settings import settings
from organiser.middleware.error_handler import AlreadyExistsError, ConflictError, NotFoundError
from organiser.models import Candidate, CandidateStatus, Interview, Organisation, User
from organiser.schemas.base import PaginatedResponse, paginate_meta
from organiser.schemas.candidates import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListItem,
)
from organiser.services.notifications import (
    NotificationService,
    get_notification_service,
    notify_safely,
)
from organiser.services.rbac import STAFF_ROLES, require_role

logger = structlog.get_logger()
router = APIRouter()

# Columns that cannot be cleared with an explicit null
NON_NULLABLE_FIELDS = {"first_name", "last_name", "skills", "status"}


def get_candidate_or_404(db: Session, candidate_id: int) -> Candidate:
    candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
    if not candidate:
        raise NotFoundError("Candidate", candidate_id)
    return candidate


def ensure_organisation_exists(db: Session, organisation_id: Optional[int]) -> None:
    if organisation_id is None:
        return
    if not db.query(Organisation.id).filter(Organisation.id == organisation_id).first():
        raise NotFoundError("Organisation", organisation_id)


def ensure_user_exists(db: Session, user_id: Optional[int]) -> None:
    if user_id is not None and not db.query(User.id).filter(User.id == user_id).first():
        raise NotFoundError("User", user_id)


@router.get("", response_model=PaginatedResponse[CandidateListItem])
async def list_candidates(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[CandidateStatus] = Query(None),
    recruiter_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """List candidates with pagination."""
    query = db.query(Candidate)

    # Filters
    if status:
        query = query.filter(Candidate.status == status)
    if recruiter_id:
        query = query.filter(Candidate.recruiter_id == recruiter_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Candidate.first_name.ilike(pattern),
                Candidate.last_name.ilike(pattern),
                Candidate.email.ilike(pattern),
                Candidate.position.ilike(pattern),
            )
        )

    total = query.count()
    candidates = (
        query.order_by(Candidate.created_at.desc(), Candidate.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    # Interview counts
    interview_counts = dict(
        db.query(Interview.candidate_id, func.count(Interview.id))
        .filter(Interview.candidate_id.in_([c.id for c in candidates]))
        .group_by(Interview.candidate_id)
        .all()
    )

    items = [
        CandidateListItem(
            id=c.id,
            first_name=c.first_name,
            last_name=c.last_name,
            email=c.email,
            position=c.position,
            status=c.status,
            interview_count=interview_counts.get(c.id, 0),
        )
        for c in candidates
    ]

    return PaginatedResponse(data=items, meta=paginate_meta(page, per_page, total))


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Get a candidate by ID."""
    return CandidateResponse.model_validate(get_candidate_or_404(db, candidate_id))


@router.post("", response_model=CandidateResponse, status_code=201)
async def create_candidate(
    data: CandidateCreate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Create a new candidate."""
    email = data.email.strip().lower()
    if db.query(Candidate).filter(Candidate.email == email).first():
        raise AlreadyExistsError("Candidate", "email", email)
    ensure_organisation_exists(db, data.recruiter_id)
    ensure_user_exists(db, data.user_id)

    candidate = Candidate(**data.model_dump(exclude={"email"}), email=email)
    db.add(candidate)
    db.commit()
    db.refresh(candidate)

    logger.info("Candidate created", id=candidate.id, recruiter_id=candidate.recruiter_id)

    if candidate.recruiter_id:
        notify_safely(notifier.notify_recruiter_new_candidate, candidate.recruiter_id, candidate)

    return CandidateResponse.model_validate(candidate)


@router.put("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    candidate_id: int,
    data: CandidateUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Update a candidate."""
    candidate = get_candidate_or_404(db, candidate_id)

    # Update only provided fields
    update_data = data.model_dump(exclude_unset=True)
    if "recruiter_id" in update_data:
        ensure_organisation_exists(db, update_data["recruiter_id"])
    if "user_id" in update_data:
        ensure_user_exists(db, update_data["user_id"])
    for key, value in update_data.items():
        if value is None and key in NON_NULLABLE_FIELDS:
            continue
        setattr(candidate, key, value)

    db.commit()
    db.refresh(candidate)

    logger.info("Candidate updated", id=candidate.id, fields=list(update_data.keys()))
    return CandidateResponse.model_validate(candidate)


@router.delete("/{candidate_id}", status_code=204)
async def delete_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Delete a candidate with no interviews."""
    candidate = get_candidate_or_404(db, candidate_id)

    if db.query(Interview.id).filter(Interview.candidate_id == candidate_id).first():
        raise ConflictError(
            f"Candidate {candidate_id} has interviews and cannot be deleted",
            details={"candidate_id": candidate_id},
        )

    db.delete(candidate)
    db.commit()

    logger.info("Candidate deleted", id=candidate_id)
