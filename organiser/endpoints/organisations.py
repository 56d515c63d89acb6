"""Organisation (recruiter) endpoints, including verification."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from organiser.config.database import get_db
from organiser.config.settings import settings
from organiser.middleware.error_handler import AlreadyExistsError, ConflictError, NotFoundError
from organiser.models import Candidate, Interview, Organisation, VerificationStatus
from organiser.schemas.base import PaginatedResponse, paginate_meta
from organiser.schemas.organisations import (
    OrganisationCreate,
    OrganisationUpdate,
    OrganisationResponse,
    OrganisationListItem,
)
from organiser.services.notifications import (
    NotificationService,
    get_notification_service,
    notify_safely,
)
from organiser.services.rbac import STAFF_ROLES, require_admin, require_role

logger = structlog.get_logger()
router = APIRouter()


def get_organisation_or_404(db: Session, organisation_id: int) -> Organisation:
    organisation = db.query(Organisation).filter(Organisation.id == organisation_id).first()
    if not organisation:
        raise NotFoundError("Organisation", organisation_id)
    return organisation


@router.get("", response_model=PaginatedResponse[OrganisationListItem])
async def list_organisations(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    verification_status: Optional[VerificationStatus] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """List organisations with pagination."""
    query = db.query(Organisation)

    # Filters
    if verification_status:
        query = query.filter(Organisation.verification_status == verification_status)
    if is_active is not None:
        query = query.filter(Organisation.is_active == is_active)
    if search:
        query = query.filter(Organisation.name.ilike(f"%{search}%"))

    total = query.count()
    organisations = (
        query.order_by(Organisation.name).offset((page - 1) * per_page).limit(per_page).all()
    )

    candidate_counts = dict(
        db.query(Candidate.recruiter_id, func.count(Candidate.id))
        .group_by(Candidate.recruiter_id)
        .all()
    )
    interview_counts = dict(
        db.query(Interview.recruiter_id, func.count(Interview.id))
        .group_by(Interview.recruiter_id)
        .all()
    )

    items = [
        OrganisationListItem(
            id=o.id,
            name=o.name,
            contact_email=o.contact_email,
            verification_status=o.verification_status,
            is_active=o.is_active,
            candidate_count=candidate_counts.get(o.id, 0),
            interview_count=interview_counts.get(o.id, 0),
        )
        for o in organisations
    ]

    return PaginatedResponse(data=items, meta=paginate_meta(page, per_page, total))


@router.get("/{organisation_id}", response_model=OrganisationResponse)
async def get_organisation(
    organisation_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Get an organisation by ID."""
    return OrganisationResponse.model_validate(get_organisation_or_404(db, organisation_id))


@router.post("", response_model=OrganisationResponse, status_code=201)
async def create_organisation(
    data: OrganisationCreate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Register an organisation. It stays inactive until an admin verifies it."""
    contact_email = data.contact_email.strip().lower()
    if db.query(Organisation).filter(Organisation.name == data.name).first():
        raise AlreadyExistsError("Organisation", "name", data.name)
    if db.query(Organisation).filter(Organisation.contact_email == contact_email).first():
        raise AlreadyExistsError("Organisation", "contact_email", contact_email)

    organisation = Organisation(
        **data.model_dump(exclude={"contact_email"}),
        contact_email=contact_email,
        verification_status=VerificationStatus.PENDING,
        is_active=False,
    )
    db.add(organisation)
    db.commit()
    db.refresh(organisation)

    logger.info("Organisation created", id=organisation.id, name=organisation.name)
    notify_safely(notifier.notify_admin_new_recruiter, organisation.name, organisation.id)

    return OrganisationResponse.model_validate(organisation)


@router.put("/{organisation_id}", response_model=OrganisationResponse)
async def update_organisation(
    organisation_id: int,
    data: OrganisationUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Update an organisation."""
    organisation = get_organisation_or_404(db, organisation_id)

    update_data = data.model_dump(exclude_unset=True)
    new_name = update_data.get("name")
    if new_name and new_name != organisation.name:
        if db.query(Organisation).filter(Organisation.name == new_name).first():
            raise AlreadyExistsError("Organisation", "name", new_name)

    for key, value in update_data.items():
        if value is None and key == "name":
            continue
        setattr(organisation, key, value)

    db.commit()
    db.refresh(organisation)

    logger.info("Organisation updated", id=organisation.id)
    return OrganisationResponse.model_validate(organisation)


@router.put("/{organisation_id}/verify", response_model=OrganisationResponse)
async def verify_organisation(
    organisation_id: int,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
    user: dict = Depends(require_admin),
):
    """Approve an organisation and activate it."""
    organisation = get_organisation_or_404(db, organisation_id)

    organisation.verification_status = VerificationStatus.VERIFIED
    organisation.rejection_reason = None
    organisation.is_active = True
    db.commit()
    db.refresh(organisation)

    logger.info("Organisation verified", id=organisation.id, by=user.get("sub"))
    notify_safely(
        notifier.notify_recruiter_verification_status,
        organisation.contact_email,
        VerificationStatus.VERIFIED.value,
    )

    return OrganisationResponse.model_validate(organisation)


@router.put("/{organisation_id}/reject", response_model=OrganisationResponse)
async def reject_organisation(
    organisation_id: int,
    reason: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
    user: dict = Depends(require_admin),
):
    """Reject an organisation and deactivate it."""
    organisation = get_organisation_or_404(db, organisation_id)

    organisation.verification_status = VerificationStatus.REJECTED
    organisation.rejection_reason = reason
    organisation.is_active = False
    db.commit()
    db.refresh(organisation)

    logger.info("Organisation rejected", id=organisation.id, reason=reason, by=user.get("sub"))
    notify_safely(
        notifier.notify_recruiter_verification_status,
        organisation.contact_email,
        VerificationStatus.REJECTED.value,
        reason,
    )

    return OrganisationResponse.model_validate(organisation)


@router.delete("/{organisation_id}", status_code=204)
async def delete_organisation(
    organisation_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
):
    """Delete an organisation that owns no interviews."""
    organisation = get_organisation_or_404(db, organisation_id)

    if db.query(Interview.id).filter(Interview.recruiter_id == organisation_id).first():
        raise ConflictError(
            f"Organisation {organisation_id} has interviews and cannot be deleted",
            details={"organisation_id": organisation_id},
        )

    db.delete(organisation)
    db.commit()

    logger.info("Organisation deleted", id=organisation_id)
