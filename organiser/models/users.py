"""User and refresh token models."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from organiser.config.database import Base

from .base import BaseModel, utcnow


class User(BaseModel):
    """
    Login identity. A user may hold several roles (e.g. RECRUITER and
    INTERVIEWER); roles are stored as a JSON list of role names.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)

    roles = Column(JSON, nullable=False, default=list)

    # Organisation the user recruits for (recruiters / org admins)
    recruiter_id = Column(
        Integer,
        ForeignKey("organisations.id", ondelete="SET NULL"),
        nullable=True,
    )

    is_active = Column(Boolean, default=True)

    # Relationships
    refresh_tokens = relationship(
        "RefreshToken", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class RefreshToken(Base):
    """Opaque refresh token; one active token per user."""

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(64), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id={self.user_id})>"
