"""Dashboard endpoints: counts aggregated from the store."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from organiser.config.database import get_db
from organiser.middleware.error_handler import ForbiddenError, NotFoundError
from organiser.models import (
    Candidate,
    Interview,
    Interviewer,
    InterviewStatus,
    Organisation,
    User,
    UserRole,
    VerificationStatus,
)
from organiser.models.base import utcnow
from organiser.schemas.dashboard import (
    AdminDashboard,
    CandidateDashboard,
    InterviewerDashboard,
    RecruiterDashboard,
    UpcomingInterview,
)
from organiser.services.rbac import (
    STAFF_ROLES,
    is_linked_user,
    is_staff,
    require_admin,
    require_role,
)

logger = structlog.get_logger()
router = APIRouter()

UPCOMING_LIMIT = 5
OPEN_STATUSES = (InterviewStatus.SCHEDULED, InterviewStatus.RESCHEDULED)


def count_by(column_rows) -> dict[str, int]:
    """Turn (enum, count) rows into a {value: count} mapping."""
    return {getattr(key, "value", key): count for key, count in column_rows}


def interview_status_counts(query: Query) -> dict[str, int]:
    rows = (
        query.with_entities(Interview.status, func.count(Interview.id))
        .group_by(Interview.status)
        .all()
    )
    return count_by(rows)


def upcoming(query: Query) -> list[UpcomingInterview]:
    interviews = (
        query.filter(
            Interview.scheduled_at >= utcnow(),
            Interview.status.in_(OPEN_STATUSES),
        )
        .order_by(Interview.scheduled_at.asc())
        .limit(UPCOMING_LIMIT)
        .all()
    )
    return [UpcomingInterview.model_validate(i) for i in interviews]


@router.get("/admin", response_model=AdminDashboard)
async def admin_dashboard(
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
):
    """System-wide totals."""
    return AdminDashboard(
        total_organisations=db.query(Organisation).count(),
        pending_organisations=db.query(Organisation)
        .filter(Organisation.verification_status == VerificationStatus.PENDING)
        .count(),
        total_users=db.query(User).count(),
        total_candidates=db.query(Candidate).count(),
        total_interviewers=db.query(Interviewer).count(),
        total_interviews=db.query(Interview).count(),
        interviews_by_status=interview_status_counts(db.query(Interview)),
    )


@router.get("/recruiter/{recruiter_id}", response_model=RecruiterDashboard)
async def recruiter_dashboard(
    recruiter_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES)),
):
    """Candidates and interviews owned by one organisation."""
    if not db.query(Organisation.id).filter(Organisation.id == recruiter_id).first():
        raise NotFoundError("Organisation", recruiter_id)

    candidates = db.query(Candidate).filter(Candidate.recruiter_id == recruiter_id)
    interviews = db.query(Interview).filter(Interview.recruiter_id == recruiter_id)

    return RecruiterDashboard(
        recruiter_id=recruiter_id,
        total_candidates=candidates.count(),
        candidates_by_status=count_by(
            candidates.with_entities(Candidate.status, func.count(Candidate.id))
            .group_by(Candidate.status)
            .all()
        ),
        total_interviews=interviews.count(),
        interviews_by_status=interview_status_counts(interviews),
        upcoming_interviews=upcoming(interviews),
    )


@router.get("/interviewer/{interviewer_id}", response_model=InterviewerDashboard)
async def interviewer_dashboard(
    interviewer_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES + [UserRole.INTERVIEWER.value])),
):
    """Workload of one interviewer."""
    interviewer = db.query(Interviewer).filter(Interviewer.id == interviewer_id).first()
    if not interviewer:
        raise NotFoundError("Interviewer", interviewer_id)
    if not is_staff(user) and not is_linked_user(user, interviewer.user_id):
        raise ForbiddenError("You can only view your own dashboard")

    assigned = db.query(Interview).filter(Interview.interviewers.any(Interviewer.id == interviewer_id))

    return InterviewerDashboard(
        interviewer_id=interviewer_id,
        total_interviews=interviewer.total_interviews or 0,
        assigned_interviews=assigned.count(),
        completed_interviews=assigned.filter(Interview.status == InterviewStatus.COMPLETED).count(),
        pending_feedback=assigned.filter(
            Interview.feedback_requested.is_(True),
            ~Interview.feedback.has(),
        ).count(),
        upcoming_interviews=upcoming(assigned),
    )


@router.get("/candidate/{candidate_id}", response_model=CandidateDashboard)
async def candidate_dashboard(
    candidate_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STAFF_ROLES + [UserRole.CANDIDATE.value])),
):
    """Interview progress of one candidate."""
    candidate = db.query(Candidate).filter(Candidate.id == candidate_id).first()
    if not candidate:
        raise NotFoundError("Candidate", candidate_id)
    if not is_staff(user) and not is_linked_user(user, candidate.user_id):
        raise ForbiddenError("You can only view your own dashboard")

    interviews = db.query(Interview).filter(Interview.candidate_id == candidate_id)

    return CandidateDashboard(
        candidate_id=candidate_id,
        status=candidate.status.value,
        total_interviews=interviews.count(),
        current_round=interviews.with_entities(func.max(Interview.round)).scalar(),
        interviews_by_status=interview_status_counts(interviews),
        upcoming_interviews=upcoming(interviews),
    )
