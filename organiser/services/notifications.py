"""Notification gateway.

Delivery is mocked: every notification is written to the structured log
instead of being emailed. Callers treat these as fire-and-forget.
"""

from typing import Optional

import structlog

from organiser.models import Candidate, Interview, Interviewer

logger = structlog.get_logger()

DATE_FORMAT = "%Y-%m-%d %H:%M"


def _fmt(value) -> Optional[str]:
    return value.strftime(DATE_FORMAT) if value else None


def _enum_value(value) -> Optional[str]:
    return getattr(value, "value", value)


class NotificationService:
    """Logs notifications for interview lifecycle and onboarding events."""

    channel = "mock"

    def _send(self, event: str, message: str, **fields) -> None:
        logger.info(
            "Notification",
            notification=event,
            channel=self.channel,
            message=message,
            **fields,
        )

    # Interview lifecycle

    def notify_interview_scheduled(self, candidate: Candidate, interview: Interview) -> None:
        self._send(
            "interview_scheduled",
            "Your interview has been scheduled. Please confirm your availability.",
            to=candidate.email,
            candidate=candidate.full_name,
            interview_id=interview.id,
            scheduled_at=_fmt(interview.scheduled_at),
            interview_type=_enum_value(interview.interview_type),
        )

    def notify_interviewer_assigned(self, interviewer: Interviewer, interview: Interview) -> None:
        self._send(
            "interviewer_assigned",
            "You have been assigned to conduct an interview.",
            to=interviewer.email,
            interviewer_id=interviewer.id,
            interview_id=interview.id,
            candidate=interview.candidate.full_name if interview.candidate else None,
            scheduled_at=_fmt(interview.scheduled_at),
        )

    def notify_interview_confirmed(self, interview: Interview) -> None:
        self._send(
            "interview_confirmed",
            "The candidate has confirmed their availability for the interview.",
            interview_id=interview.id,
            candidate=interview.candidate.full_name if interview.candidate else None,
            confirmed_at=_fmt(interview.candidate_confirmed_at),
        )

    def notify_interview_cancelled(self, interview: Interview, reason: str) -> None:
        self._send(
            "interview_cancelled",
            "The interview has been cancelled.",
            interview_id=interview.id,
            reason=reason,
        )

    def request_feedback(self, interviewer: Interviewer, interview: Interview) -> None:
        self._send(
            "feedback_requested",
            "Please provide your feedback for the completed interview.",
            to=interviewer.email,
            interviewer_id=interviewer.id,
            interview_id=interview.id,
        )

    def request_candidate_feedback(self, candidate: Candidate, interview: Interview) -> None:
        self._send(
            "candidate_feedback_requested",
            "We'd love to hear about your interview experience. Feedback is optional.",
            to=candidate.email,
            candidate=candidate.full_name,
            interview_id=interview.id,
        )

    def notify_candidate_result(self, candidate: Candidate, interview: Interview, result: str) -> None:
        self._send(
            "interview_result",
            "Your interview result has been updated.",
            to=candidate.email,
            candidate=candidate.full_name,
            interview_id=interview.id,
            result=result,
        )

    def notify_next_round_scheduled(self, candidate: Candidate, interview: Interview) -> None:
        self._send(
            "next_round_scheduled",
            "Congratulations! You have been selected for the next round of interviews.",
            to=candidate.email,
            candidate=candidate.full_name,
            interview_id=interview.id,
            round=interview.round,
            scheduled_at=_fmt(interview.scheduled_at),
        )

    # Onboarding

    def notify_recruiter_new_candidate(self, recruiter_id: int, candidate: Candidate) -> None:
        self._send(
            "new_candidate",
            "A new candidate has applied.",
            recruiter_id=recruiter_id,
            candidate=candidate.full_name,
            email=candidate.email,
            position=candidate.position,
        )

    def notify_admin_new_recruiter(self, recruiter_name: str, recruiter_id: int) -> None:
        self._send(
            "new_recruiter",
            "A new recruiter has registered and is pending verification.",
            to="admin",
            recruiter=recruiter_name,
            recruiter_id=recruiter_id,
        )

    def notify_recruiter_verification_status(
        self,
        recruiter_email: str,
        status: str,
        reason: Optional[str] = None,
    ) -> None:
        self._send(
            "recruiter_verification",
            "Your recruiter account verification status has been updated.",
            to=recruiter_email,
            status=status,
            reason=reason,
        )


def notify_safely(send, *args, **kwargs) -> None:
    """Invoke a notifier method, logging and swallowing any failure."""
    try:
        send(*args, **kwargs)
    except Exception as e:
        logger.error(
            "Notification failed",
            notification=getattr(send, "__name__", repr(send)),
            error=str(e),
            error_type=type(e).__name__,
        )


def get_notification_service() -> NotificationService:
    """Dependency returning the notification gateway."""
    return NotificationService()
