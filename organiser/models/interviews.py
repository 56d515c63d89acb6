"""Interview model, the aggregate owned by the lifecycle service."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Text,
    ForeignKey,
    Index,
    Table,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship

from organiser.config.database import Base

from .base import BaseModel
from .enums import InterviewStatus, InterviewType, InterviewResult


interview_interviewers = Table(
    "interview_interviewers",
    Base.metadata,
    Column(
        "interview_id",
        Integer,
        ForeignKey("interviews.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "interviewer_id",
        Integer,
        ForeignKey("interviewers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Interview(BaseModel):
    """
    A scheduled interview between one candidate and one or more interviewers.

    Status Values:
    - SCHEDULED: Initial state
    - RESCHEDULED: Moved to a new slot, still pending
    - IN_PROGRESS: Interview under way
    - COMPLETED: Finished (terminal); result may be set
    - CANCELLED: Called off (terminal)
    - NO_SHOW: Candidate did not attend

    Confirmation is tracked by candidate_confirmed, not by a status.
    version is bumped by SQLAlchemy on every UPDATE; a write against a stale
    row raises StaleDataError.
    """

    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Owner context
    recruiter_id = Column(
        Integer,
        ForeignKey("organisations.id", ondelete="SET NULL"),
        nullable=True,
    )
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False)

    # Slot
    scheduled_at = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    interview_type = Column(SAEnum(InterviewType, native_enum=False, length=30), nullable=False)
    round = Column(Integer, nullable=False, default=1)

    status = Column(
        SAEnum(InterviewStatus, native_enum=False, length=20),
        default=InterviewStatus.SCHEDULED,
        nullable=False,
    )

    meeting_link = Column(String(500), nullable=True)
    location = Column(String(500), nullable=True)  # For onsite interviews

    # Append-only log of notes and transition reasons
    notes = Column(Text, nullable=True)

    # Candidate confirmation
    candidate_confirmed = Column(Boolean, default=False, nullable=False)
    candidate_confirmed_at = Column(DateTime, nullable=True)

    # Feedback tracking
    feedback_requested = Column(Boolean, default=False, nullable=False)
    feedback_requested_at = Column(DateTime, nullable=True)

    # Outcome
    result = Column(SAEnum(InterviewResult, native_enum=False, length=20), nullable=True)
    next_round_interview_id = Column(Integer, ForeignKey("interviews.id"), nullable=True)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("idx_interviews_status", "status"),
        Index("idx_interviews_candidate", "candidate_id"),
        Index("idx_interviews_scheduled", "scheduled_at"),
    )

    # Relationships
    candidate = relationship("Candidate", back_populates="interviews")
    recruiter = relationship("Organisation", back_populates="interviews")
    interviewers = relationship(
        "Interviewer",
        secondary=interview_interviewers,
        back_populates="interviews",
        order_by="Interviewer.id",
    )
    feedback = relationship(
        "Feedback",
        back_populates="interview",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Interview(id={self.id}, status={self.status}, round={self.round})>"
