"""Interviewer model."""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship

from .base import BaseModel


class Interviewer(BaseModel):
    """
    Staff member who conducts interviews.

    total_interviews is a denormalized counter bumped when an interview is
    scheduled with this interviewer. It is updated after the interview is
    committed and may drift if that second write fails.
    """

    __tablename__ = "interviewers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    department = Column(String(255), nullable=True)
    expertise = Column(JSON, nullable=False, default=list)  # list of strings
    years_of_experience = Column(Integer, nullable=True)

    availability = Column(Boolean, default=True)
    total_interviews = Column(Integer, default=0, nullable=False)

    # Relationships
    user = relationship("User")
    interviews = relationship(
        "Interview",
        secondary="interview_interviewers",
        back_populates="interviewers",
    )

    def __repr__(self) -> str:
        return f"<Interviewer(id={self.id}, email={self.email})>"
