"""Interview lifecycle service.

Owns every mutation of the Interview aggregate:
- Scheduling and next-round creation
- Detail, status and confirmation updates
- Result marking, feedback requests and cancellation

Each public method is one unit of work against the session. Notifications
are sent after the commit and never undo it.
"""

from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from organiser.config.settings import settings
from organiser.middleware.error_handler import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from organiser.models import (
    Candidate,
    Interview,
    Interviewer,
    InterviewResult,
    InterviewStatus,
    Organisation,
)
from organiser.models.base import utcnow
from organiser.schemas.interviews import (
    ConfirmInterviewRequest,
    CreateNextRoundRequest,
    MarkInterviewResultRequest,
    ScheduleInterviewRequest,
    UpdateInterviewRequest,
    UpdateInterviewStatusRequest,
)

from .lifecycle import ensure_transition
from .notifications import NotificationService, notify_safely

logger = structlog.get_logger()

CANCELLATION_REASON = "Interview cancelled"
NOTE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class InterviewService:
    """State machine and scheduling rules for interviews."""

    def __init__(
        self,
        db: Session,
        notifier: Optional[NotificationService] = None,
        enforce_transitions: Optional[bool] = None,
        notify_on_schedule: Optional[bool] = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService()
        self.enforce_transitions = (
            settings.ENFORCE_STATUS_TRANSITIONS
            if enforce_transitions is None
            else enforce_transitions
        )
        self.notify_on_schedule = (
            settings.NOTIFY_ON_SCHEDULE
            if notify_on_schedule is None
            else notify_on_schedule
        )

    # Reads

    def get_interview(self, interview_id: int) -> Interview:
        interview = self.db.query(Interview).filter(Interview.id == interview_id).first()
        if not interview:
            raise NotFoundError("Interview", interview_id)
        return interview

    def list_interviews(
        self,
        page: int = 1,
        per_page: int = 20,
        status: Optional[InterviewStatus] = None,
        candidate_id: Optional[int] = None,
        interviewer_id: Optional[int] = None,
        recruiter_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> tuple[list[Interview], int]:
        """List interviews matching every given filter, newest slot first.

        Returns:
            Tuple of (interviews on the requested page, total matching)
        """
        query = self.db.query(Interview)

        if status:
            query = query.filter(Interview.status == status)
        if candidate_id:
            query = query.filter(Interview.candidate_id == candidate_id)
        if interviewer_id:
            query = query.filter(Interview.interviewers.any(Interviewer.id == interviewer_id))
        if recruiter_id:
            query = query.filter(Interview.recruiter_id == recruiter_id)
        if date_from:
            query = query.filter(Interview.scheduled_at >= date_from)
        if date_to:
            query = query.filter(Interview.scheduled_at <= date_to)

        total = query.count()
        interviews = (
            query.order_by(Interview.scheduled_at.desc(), Interview.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return interviews, total

    # Scheduling

    def schedule_interview(self, request: ScheduleInterviewRequest) -> Interview:
        """Create a SCHEDULED interview and bump each interviewer's counter.

        The counter update is a second, best-effort commit: if it fails the
        interview stays scheduled and the failure is only logged.
        """
        candidate = self._get_candidate(request.candidate_id)
        interviewers = self._get_interviewers(request.interviewer_ids)

        recruiter_id = candidate.recruiter_id
        if request.recruiter_id is not None:
            self._get_organisation(request.recruiter_id)
            recruiter_id = request.recruiter_id

        now = utcnow()
        interview = Interview(
            candidate_id=candidate.id,
            recruiter_id=recruiter_id,
            scheduled_at=request.scheduled_at,
            duration=request.duration or settings.DEFAULT_INTERVIEW_DURATION,
            interview_type=request.interview_type,
            round=request.round,
            status=InterviewStatus.SCHEDULED,
            meeting_link=request.meeting_link,
            location=request.location,
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        interview.interviewers = interviewers
        self.db.add(interview)
        self.db.commit()
        self.db.refresh(interview)

        logger.info(
            "Interview scheduled",
            interview_id=interview.id,
            candidate_id=candidate.id,
            interviewer_ids=[i.id for i in interviewers],
            round=interview.round,
        )

        self._increment_interview_counts(interviewers)

        if self.notify_on_schedule:
            notify_safely(self.notifier.notify_interview_scheduled, candidate, interview)
            for interviewer in interviewers:
                notify_safely(self.notifier.notify_interviewer_assigned, interviewer, interview)

        return interview

    def create_next_round(
        self,
        previous_interview_id: int,
        request: CreateNextRoundRequest,
    ) -> Interview:
        """Spawn the follow-on interview for the same candidate.

        A previous interview links to at most one next round.
        """
        previous = self.get_interview(previous_interview_id)
        interviewers = self._get_interviewers(request.interviewer_ids)

        if previous.next_round_interview_id is not None:
            raise ConflictError(
                f"Interview {previous.id} already has a next round",
                details={
                    "interview_id": previous.id,
                    "next_round_interview_id": previous.next_round_interview_id,
                },
            )

        now = utcnow()
        next_round = Interview(
            candidate_id=previous.candidate_id,
            recruiter_id=previous.recruiter_id,
            scheduled_at=request.scheduled_at,
            duration=request.duration or settings.DEFAULT_INTERVIEW_DURATION,
            interview_type=request.interview_type,
            round=previous.round + 1,
            status=InterviewStatus.SCHEDULED,
            meeting_link=request.meeting_link,
            location=request.location,
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        next_round.interviewers = interviewers
        self.db.add(next_round)
        self.db.flush()

        previous.next_round_interview_id = next_round.id
        previous.updated_at = now
        self._commit(previous)
        self.db.refresh(next_round)

        logger.info(
            "Next round created",
            previous_interview_id=previous.id,
            interview_id=next_round.id,
            round=next_round.round,
        )

        notify_safely(self.notifier.notify_next_round_scheduled, next_round.candidate, next_round)
        for interviewer in interviewers:
            notify_safely(self.notifier.notify_interviewer_assigned, interviewer, next_round)

        return next_round

    # Updates

    def update_interview(self, interview_id: int, request: UpdateInterviewRequest) -> Interview:
        """Partially update slot details. Status is never touched here."""
        interview = self.get_interview(interview_id)
        self._check_version(interview, request.expected_version)

        update_data = request.model_dump(exclude_unset=True, exclude={"notes", "expected_version"})
        for field, value in update_data.items():
            if value is None and field in ("scheduled_at", "duration", "interview_type"):
                continue
            setattr(interview, field, value)

        if request.notes:
            self._append_note(interview, request.notes)

        self._touch(interview)
        self._commit(interview)

        logger.info("Interview updated", interview_id=interview_id, fields=list(update_data.keys()))
        return interview

    def update_status(self, interview_id: int, request: UpdateInterviewStatusRequest) -> Interview:
        """Move the interview to a new status, logging the reason in notes."""
        interview = self.get_interview(interview_id)
        self._check_version(interview, request.expected_version)

        previous_status = InterviewStatus(interview.status)
        self._set_status(interview, request.status)

        if request.reason:
            self._append_note(
                interview,
                f"Status changed from {previous_status.value} to {request.status.value}: {request.reason}",
            )

        self._touch(interview)
        self._commit(interview)

        logger.info(
            "Interview status updated",
            interview_id=interview_id,
            from_status=previous_status.value,
            to_status=request.status.value,
        )
        return interview

    def confirm_interview(self, interview_id: int, request: ConfirmInterviewRequest) -> Interview:
        """Record the candidate's confirmation.

        candidate_confirmed_at is stamped on every call, including when the
        candidate withdraws confirmation.
        """
        interview = self.get_interview(interview_id)
        self._check_version(interview, request.expected_version)

        now = utcnow()
        interview.candidate_confirmed = request.confirmed
        interview.candidate_confirmed_at = now

        if request.notes:
            self._append_note(interview, request.notes)

        self._touch(interview, now)
        self._commit(interview)

        logger.info("Interview confirmation recorded", interview_id=interview_id, confirmed=request.confirmed)

        if request.confirmed:
            notify_safely(self.notifier.notify_interview_confirmed, interview)

        return interview

    def mark_result(self, interview_id: int, request: MarkInterviewResultRequest) -> Interview:
        """Set the outcome and complete the interview."""
        try:
            result = InterviewResult(request.result)
        except ValueError:
            raise InvalidArgumentError(
                f"Invalid interview result: {request.result}. "
                f"Must be one of {', '.join(r.value for r in InterviewResult)}",
                field="result",
            )

        interview = self.get_interview(interview_id)
        self._check_version(interview, request.expected_version)

        self._set_status(interview, InterviewStatus.COMPLETED)
        interview.result = result

        if request.comments:
            self._append_note(interview, f"Result {result.value}: {request.comments}")

        self._touch(interview)
        self._commit(interview)

        logger.info("Interview result marked", interview_id=interview_id, result=result.value)

        notify_safely(self.notifier.notify_candidate_result, interview.candidate, interview, result.value)
        return interview

    def request_feedback(self, interview_id: int) -> Interview:
        """Flag the interview for feedback and ask every participant for it."""
        interview = self.get_interview(interview_id)

        now = utcnow()
        interview.feedback_requested = True
        interview.feedback_requested_at = now
        self._touch(interview, now)
        self._commit(interview)

        logger.info(
            "Feedback requested",
            interview_id=interview_id,
            interviewer_count=len(interview.interviewers),
        )

        for interviewer in interview.interviewers:
            notify_safely(self.notifier.request_feedback, interviewer, interview)
        notify_safely(self.notifier.request_candidate_feedback, interview.candidate, interview)

        return interview

    def cancel_interview(self, interview_id: int) -> Interview:
        """Cancel the interview. Repeat calls notify again."""
        interview = self.get_interview(interview_id)

        self._set_status(interview, InterviewStatus.CANCELLED)
        self._touch(interview)
        self._commit(interview)

        logger.info("Interview cancelled", interview_id=interview_id)

        notify_safely(self.notifier.notify_interview_cancelled, interview, CANCELLATION_REASON)
        return interview

    # Helpers

    def _get_candidate(self, candidate_id: int) -> Candidate:
        candidate = self.db.query(Candidate).filter(Candidate.id == candidate_id).first()
        if not candidate:
            raise NotFoundError("Candidate", candidate_id)
        return candidate

    def _get_organisation(self, organisation_id: int) -> Organisation:
        organisation = (
            self.db.query(Organisation).filter(Organisation.id == organisation_id).first()
        )
        if not organisation:
            raise NotFoundError("Organisation", organisation_id)
        return organisation

    def _get_interviewers(self, interviewer_ids: list[int]) -> list[Interviewer]:
        """Resolve interviewer ids in request order, collapsing duplicates."""
        unique_ids = list(dict.fromkeys(interviewer_ids))
        if not unique_ids:
            raise InvalidArgumentError("At least one interviewer is required", field="interviewer_ids")

        found = {
            i.id: i
            for i in self.db.query(Interviewer).filter(Interviewer.id.in_(unique_ids)).all()
        }
        for interviewer_id in unique_ids:
            if interviewer_id not in found:
                raise NotFoundError("Interviewer", interviewer_id)
        return [found[i] for i in unique_ids]

    def _increment_interview_counts(self, interviewers: list[Interviewer]) -> None:
        # Single UPDATE in the database; concurrent schedules each add one
        try:
            (
                self.db.query(Interviewer)
                .filter(Interviewer.id.in_([i.id for i in interviewers]))
                .update(
                    {Interviewer.total_interviews: Interviewer.total_interviews + 1},
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(
                "Failed to update interviewer counters",
                interviewer_ids=[i.id for i in interviewers],
                error=str(e),
            )

    def _set_status(self, interview: Interview, status: InterviewStatus) -> None:
        if self.enforce_transitions:
            ensure_transition(interview.id, interview.status, status)
        interview.status = status
        # A result only belongs to a completed interview
        if status != InterviewStatus.COMPLETED:
            interview.result = None

    def _check_version(self, interview: Interview, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != interview.version:
            raise ConflictError(
                f"Interview {interview.id} was modified by another request",
                details={
                    "interview_id": interview.id,
                    "expected_version": expected_version,
                    "current_version": interview.version,
                },
            )

    def _append_note(self, interview: Interview, text: str) -> None:
        line = f"[{utcnow().strftime(NOTE_TIMESTAMP_FORMAT)}] {text}"
        interview.notes = f"{interview.notes}\n{line}" if interview.notes else line

    def _touch(self, interview: Interview, now: Optional[datetime] = None) -> None:
        interview.updated_at = now or utcnow()

    def _commit(self, interview: Interview) -> None:
        interview_id = interview.id
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.warning("Concurrent interview update rejected", interview_id=interview_id)
            raise ConflictError(
                f"Interview {interview_id} was modified by another request",
                details={"interview_id": interview_id},
            )
        self.db.refresh(interview)
