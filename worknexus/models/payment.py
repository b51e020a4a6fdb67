import enum
import uuid
from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from worknexus.core.database import Base
from worknexus.core.timeutils import utcnow


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(Base):
    """
    Payout owed by an organizer to a worker for a job.

    amount = platform_fee + worker_payout.
    """
    __tablename__ = "payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    organizer_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    worker_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    platform_fee = Column(Float, nullable=False, default=0.0)
    worker_payout = Column(Float, nullable=False, default=0.0)
    payment_method = Column(String, nullable=True)
    transaction_id = Column(String, nullable=True)

    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)


class Rating(Base):
    """A 1-5 star review left after a job, in either direction."""
    __tablename__ = "ratings"
    __table_args__ = (UniqueConstraint("job_id", "rater_id", "rated_id", name="uq_ratings_job_rater_rated"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    rater_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    rated_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    # True when the organizer rated a worker
    is_organizer_rating = Column(Boolean, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
