"""
Profile model.

Public and personal data for a user, keyed by the user's id. Holds the
denormalised counters (rating, jobs completed, late arrivals) shown on
profile and reliability views.
"""

import enum
from sqlalchemy import Column, String, Boolean, Date, DateTime, Enum, Float, ForeignKey, Integer, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from worknexus.core.database import Base


class VerificationStatus(str, enum.Enum):
    """
    Identity verification lifecycle:

    (none) -> PENDING (document uploaded) -> VERIFIED | REJECTED
    """
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True, index=True)
    state = Column(String, nullable=True)
    pincode = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    college_name = Column(String, nullable=True)

    emergency_contact = Column(String, nullable=True)
    emergency_phone = Column(String, nullable=True)

    is_available = Column(Boolean, default=True, nullable=False)

    # Identity verification
    kyc_document_url = Column(String, nullable=True)
    verification_status = Column(Enum(VerificationStatus), nullable=True, index=True)

    # Reputation counters
    rating = Column(Float, default=0.0, nullable=False)
    total_jobs_completed = Column(Integer, default=0, nullable=False)
    reliability_score = Column(Integer, default=100, nullable=False)
    total_no_shows = Column(Integer, default=0, nullable=False)
    total_late_arrivals = Column(Integer, default=0, nullable=False)
    backup_pool_member = Column(Boolean, default=False, nullable=False)

    # Safety preferences
    night_shift_opted_out = Column(Boolean, default=False, nullable=False)
    working_radius_km = Column(Integer, default=25, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile(id={self.id}, full_name='{self.full_name}')>"
