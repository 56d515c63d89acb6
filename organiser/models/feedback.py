"""Feedback model for interview assessments."""

from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import FeedbackRecommendation


class Feedback(BaseModel):
    """
    Interview feedback (one record per interview).

    Scores use a 1-5 scale.
    """

    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    interview_id = Column(
        Integer,
        ForeignKey("interviews.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Scores
    rating = Column(Integer, nullable=False)
    technical_skills = Column(Integer, nullable=True)
    communication_skills = Column(Integer, nullable=True)
    problem_solving = Column(Integer, nullable=True)
    cultural_fit = Column(Integer, nullable=True)

    # Narrative
    comments = Column(Text, nullable=True)
    strengths = Column(Text, nullable=True)
    weaknesses = Column(Text, nullable=True)

    recommendation = Column(
        SAEnum(FeedbackRecommendation, native_enum=False, length=20),
        nullable=True,
    )

    submitted_at = Column(DateTime, nullable=True)

    # Relationships
    interview = relationship("Interview", back_populates="feedback")

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, interview_id={self.interview_id}, rating={self.rating})>"
