"""
Job application model.

One row per (job, applicant). The structured fields of the apply form
(availability, expected wage, experience) are stored in their own columns.
"""

import enum
import uuid
from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from worknexus.core.database import Base
from worknexus.core.timeutils import utcnow


class ApplicationStatus(str, enum.Enum):
    """
    Application lifecycle:

    PENDING -> ACCEPTED | REJECTED   (organizer review)
    PENDING -> WITHDRAWN             (applicant)
    """
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (UniqueConstraint("job_id", "applicant_id", name="uq_job_applications_job_applicant"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    cover_letter = Column(Text, nullable=False)
    availability = Column(String, nullable=True)
    expected_wage = Column(Float, nullable=True)
    years_experience = Column(Integer, nullable=True)

    status = Column(Enum(ApplicationStatus), default=ApplicationStatus.PENDING, nullable=False, index=True)

    applied_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    job = relationship("Job", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication(id={self.id}, job_id={self.job_id}, status={self.status.value})>"
