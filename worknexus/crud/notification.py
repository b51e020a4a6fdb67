"""
CRUD operations for Notification model.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.models.notification import Notification


def build(
    user_id: UUID,
    title: str,
    message: str,
    type: Optional[str] = None,
    related_id: Optional[UUID] = None,
) -> Notification:
    """Construct an unsaved notification so callers can commit it with their own changes."""
    return Notification(user_id=user_id, title=title, message=message, type=type, related_id=related_id)


def get_by_id(db: Session, notification_id: UUID) -> Optional[Notification]:
    return db.query(Notification).filter(Notification.id == notification_id).first()


def get_for_user(db: Session, user_id: UUID, limit: int = 50) -> List[Notification]:
    """Most recent notifications for a user."""
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )


def mark_read(db: Session, notification: Notification) -> Notification:
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """
    Mark every unread notification of a user as read.

    Returns:
        Number of notifications updated
    """
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({"is_read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def unread_count(db: Session, user_id: UUID) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .count()
    )
