"""Candidate model."""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, JSON, Enum as SAEnum
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import CandidateStatus


class Candidate(BaseModel):
    """Person being interviewed. Shared by interviews, never owned by them."""

    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, autoincrement=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(50), nullable=True)

    # Profile
    position = Column(String(255), nullable=True)
    experience = Column(Float, nullable=True)  # years
    skills = Column(JSON, nullable=False, default=list)  # list of strings
    resume_url = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)

    status = Column(
        SAEnum(CandidateStatus, native_enum=False, length=20),
        default=CandidateStatus.APPLIED,
        nullable=False,
    )

    recruiter_id = Column(
        Integer,
        ForeignKey("organisations.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Login account allowed to act for this candidate (confirmations)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Relationships
    recruiter = relationship("Organisation", back_populates="candidates")
    user = relationship("User")
    interviews = relationship("Interview", back_populates="candidate")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, email={self.email})>"
