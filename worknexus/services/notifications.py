"""
In-app notification helpers.

Services queue notifications on the session alongside the change that
caused them, commit once, then call publish_notifications() so connected
clients see the new rows.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.core.realtime import INSERT
from worknexus.crud import notification as notification_crud
from worknexus.models.notification import Notification
from worknexus.schemas.message import NotificationResponse
from worknexus.services.events import publish_row

logger = logging.getLogger(__name__)


def queue_notification(
    db: Session,
    user_id: UUID,
    title: str,
    message: str,
    type: Optional[str] = None,
    related_id: Optional[UUID] = None,
) -> Notification:
    """Add a notification to the session without committing."""
    notification = notification_crud.build(user_id, title, message, type=type, related_id=related_id)
    db.add(notification)
    return notification


def publish_notifications(notifications: Iterable[Notification]) -> None:
    for notification in notifications:
        publish_row("notifications", INSERT, NotificationResponse, notification, [notification.user_id])


def notify(
    db: Session,
    user_id: UUID,
    title: str,
    message: str,
    type: Optional[str] = None,
    related_id: Optional[UUID] = None,
) -> Notification:
    """
    Create, commit and publish a single notification.

    Args:
        db: Database session
        user_id: Recipient
        title: Short heading shown in the notification list
        message: Body text
        type: One of NotificationType
        related_id: Row the notification is about (job, application, ...)

    Returns:
        The stored Notification
    """
    notification = queue_notification(db, user_id, title, message, type=type, related_id=related_id)
    db.commit()
    db.refresh(notification)
    publish_notifications([notification])
    logger.info(f"Notification '{type}' sent to user {user_id}")
    return notification
