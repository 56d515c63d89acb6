"""Organisation model (recruiting companies)."""

from sqlalchemy import Column, Integer, String, Boolean, Text, Enum as SAEnum
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import VerificationStatus


class Organisation(BaseModel):
    """
    Recruiting organisation. Interviews and candidates reference it as their
    recruiter context.

    Starts PENDING and inactive; becomes active once an admin verifies it.
    """

    __tablename__ = "organisations"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Identity
    name = Column(String(255), unique=True, nullable=False)
    registration_number = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)

    # Contact
    contact_email = Column(String(255), unique=True, nullable=False)
    contact_phone = Column(String(50), nullable=True)

    # Address
    street = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)

    # Onboarding
    verification_status = Column(
        SAEnum(VerificationStatus, native_enum=False, length=20),
        default=VerificationStatus.PENDING,
        nullable=False,
    )
    rejection_reason = Column(Text, nullable=True)
    admin_user_id = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=False)

    # Relationships
    candidates = relationship("Candidate", back_populates="recruiter")
    interviews = relationship("Interview", back_populates="recruiter")

    def __repr__(self) -> str:
        return f"<Organisation(id={self.id}, name={self.name})>"
