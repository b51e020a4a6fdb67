"""
Organizer role request model.

A worker asks to be upgraded to organizer; an admin approves or rejects.
"""

import enum
import uuid
from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from worknexus.core.database import Base
from worknexus.core.timeutils import utcnow


class RoleRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RoleRequest(Base):
    __tablename__ = "role_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    business_name = Column(String, nullable=False)
    business_type = Column(String, nullable=False)
    reason = Column(Text, nullable=False)

    status = Column(Enum(RoleRequestStatus), default=RoleRequestStatus.PENDING, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
