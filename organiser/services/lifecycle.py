"""Interview status transition rules."""

from organiser.middleware.error_handler import ConflictError
from organiser.models.enums import InterviewStatus

TERMINAL_STATES = frozenset({InterviewStatus.COMPLETED, InterviewStatus.CANCELLED})

VALID_TRANSITIONS: dict[InterviewStatus, frozenset[InterviewStatus]] = {
    InterviewStatus.SCHEDULED: frozenset({
        InterviewStatus.RESCHEDULED,
        InterviewStatus.IN_PROGRESS,
        InterviewStatus.COMPLETED,
        InterviewStatus.CANCELLED,
        InterviewStatus.NO_SHOW,
    }),
    InterviewStatus.RESCHEDULED: frozenset({
        InterviewStatus.SCHEDULED,
        InterviewStatus.IN_PROGRESS,
        InterviewStatus.COMPLETED,
        InterviewStatus.CANCELLED,
        InterviewStatus.NO_SHOW,
    }),
    InterviewStatus.IN_PROGRESS: frozenset({
        InterviewStatus.COMPLETED,
        InterviewStatus.CANCELLED,
        InterviewStatus.NO_SHOW,
    }),
    InterviewStatus.NO_SHOW: frozenset({
        InterviewStatus.RESCHEDULED,
        InterviewStatus.CANCELLED,
    }),
    InterviewStatus.COMPLETED: frozenset(),
    InterviewStatus.CANCELLED: frozenset(),
}


def can_transition(current: InterviewStatus, target: InterviewStatus) -> bool:
    """Whether an interview in `current` may move to `target`.

    Staying in the same status is always allowed.
    """
    current = InterviewStatus(current)
    target = InterviewStatus(target)
    if current == target:
        return True
    return target in VALID_TRANSITIONS.get(current, frozenset())


def ensure_transition(interview_id: int, current: InterviewStatus, target: InterviewStatus) -> None:
    """Raise ConflictError if the move is not in the transition table."""
    if can_transition(current, target):
        return

    allowed = sorted(s.value for s in VALID_TRANSITIONS.get(InterviewStatus(current), ()))
    raise ConflictError(
        f"Cannot move interview from {InterviewStatus(current).value} to {InterviewStatus(target).value}",
        details={
            "interview_id": interview_id,
            "from": InterviewStatus(current).value,
            "to": InterviewStatus(target).value,
            "allowed": allowed,
        },
    )
