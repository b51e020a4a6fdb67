"""
On-site attendance and safety models.

QRCheckin records a worker's arrival and departure for a job (one per
worker per job). SafetyCheckin is an append-only log of geolocated events:
shift start, shift end and SOS alerts. Coordinates are stored as reported
by the device.
"""

import enum
import uuid
from sqlalchemy import Column, Boolean, DateTime, Enum, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from worknexus.core.database import Base
from worknexus.core.timeutils import utcnow


class QRCheckin(Base):
    __tablename__ = "qr_checkins"
    __table_args__ = (UniqueConstraint("job_id", "worker_id", name="uq_qr_checkins_job_worker"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    worker_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    qr_code = Column(String, nullable=False)
    checked_in_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    checked_out_at = Column(DateTime(timezone=True), nullable=True)
    is_late = Column(Boolean, default=False, nullable=False)
    minutes_late = Column(Integer, default=0, nullable=False)


class CheckinType(str, enum.Enum):
    START = "start"
    END = "end"
    SOS = "sos"


class SafetyCheckin(Base):
    __tablename__ = "safety_checkins"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=True, index=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    checkin_type = Column(Enum(CheckinType), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class EmergencyContact(Base):
    __tablename__ = "emergency_contacts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    relationship = Column(String, nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
