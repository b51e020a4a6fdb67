import uuid
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from worknexus.core.database import Base
from worknexus.core.timeutils import utcnow


class NotificationType:
    """Known values of Notification.type (free-form column)."""
    NEW_APPLICATION = "new_application"
    APPLICATION_ACCEPTED = "application_accepted"
    APPLICATION_REJECTED = "application_rejected"
    ROLE_APPROVED = "role_approved"
    ROLE_REJECTED = "role_rejected"
    SOS_ALERT = "sos_alert"
    PAYMENT = "payment"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String, nullable=True)
    related_id = Column(UUID(as_uuid=True), nullable=True)

    is_read = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
