import enum
import uuid
from sqlalchemy import (
    Column, String, Boolean, DateTime, Enum, Float, ForeignKey, Integer, JSON, Text, UniqueConstraint, func
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from worknexus.core.database import Base
from worknexus.core.timeutils import utcnow


class JobStatus(str, enum.Enum):
    """
    Job posting lifecycle.

    - DRAFT: Saved by the organizer, not visible to workers
    - OPEN: Accepting applications
    - IN_PROGRESS: Event underway
    - COMPLETED: Event finished
    - CANCELLED: Withdrawn by the organizer
    """
    DRAFT = "draft"
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Job(Base):
    """
    A short-term paid gig posted by an organizer.
    """
    __tablename__ = "jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    organizer_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    event_type = Column(String, nullable=True, index=True)

    # Where
    location = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # When
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    total_hours = Column(Float, nullable=True)

    # Staffing and pay
    workers_needed = Column(Integer, nullable=False)
    workers_hired = Column(Integer, default=0, nullable=False)
    wage_per_hour = Column(Float, nullable=False)

    # Perks and requirements
    is_urgent = Column(Boolean, default=False, nullable=False)
    meal_provided = Column(Boolean, default=False, nullable=False)
    transportation_provided = Column(Boolean, default=False, nullable=False)
    dress_code = Column(String, nullable=True)
    requirements = Column(JSON, nullable=False, default=list)

    status = Column(Enum(JobStatus), default=JobStatus.OPEN, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    applications = relationship("JobApplication", back_populates="job", cascade="all, delete-orphan")
    bookmarks = relationship("JobBookmark", back_populates="job", cascade="all, delete-orphan")

    @property
    def is_full(self) -> bool:
        return (self.workers_hired or 0) >= self.workers_needed

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status.value})>"


class JobBookmark(Base):
    """A job saved for later by a user."""
    __tablename__ = "job_bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_job_bookmarks_user_job"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    job = relationship("Job", back_populates="bookmarks")
