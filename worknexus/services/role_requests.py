"""
Organizer role requests: submission by workers, review by admins.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from worknexus.core.timeutils import utcnow
from worknexus.crud import profile as profile_crud
from worknexus.crud import role_request as role_request_crud
from worknexus.crud import user as user_crud
from worknexus.models.notification import NotificationType
from worknexus.models.role_request import RoleRequest, RoleRequestStatus
from worknexus.models.user import AppRole, User
from worknexus.schemas.profile import PublicProfile
from worknexus.schemas.role_request import RoleRequestCreateRequest, RoleRequestResponse, RoleRequestWithUser
from worknexus.services.notifications import publish_notifications, queue_notification

logger = logging.getLogger(__name__)


def submit(db: Session, user: User, data: RoleRequestCreateRequest) -> RoleRequest:
    """
    Raises:
        HTTPException 400: User already has organizer rights, or blank fields
        HTTPException 409: A pending request already exists
    """
    if user.is_organizer:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You already have organizer access")
    if not (data.business_name.strip() and data.business_type.strip() and data.reason.strip()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")
    if role_request_crud.get_pending_for_user(db, user.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You already have a pending request")

    request = role_request_crud.create(db, user.id, data)
    logger.info(f"Organizer role requested by user {user.id}")
    return request


def list_with_users(db: Session, status_filter: Optional[RoleRequestStatus] = None) -> List[RoleRequestWithUser]:
    requests = role_request_crud.get_multi(db, status=status_filter)
    profiles = profile_crud.get_many(db, (r.user_id for r in requests))
    result = []
    for request in requests:
        profile = profiles.get(request.user_id)
        result.append(RoleRequestWithUser(
            **RoleRequestResponse.model_validate(request).model_dump(),
            user=PublicProfile.model_validate(profile) if profile else None,
        ))
    return result


def _get_pending_or_error(db: Session, request_id: UUID) -> RoleRequest:
    request = role_request_crud.get_by_id(db, request_id)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role request not found")
    if request.status != RoleRequestStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Request is already {request.status.value}"
        )
    return request


def approve(db: Session, request_id: UUID, admin: User) -> RoleRequest:
    """Grant the organizer role and close the request in one commit."""
    request = _get_pending_or_error(db, request_id)

    user_crud.add_role(db, request.user_id, AppRole.ORGANIZER)
    request.status = RoleRequestStatus.APPROVED
    request.reviewed_at = utcnow()
    request.reviewed_by = admin.id
    notification = queue_notification(
        db,
        request.user_id,
        "Organizer access approved",
        f"Your request for {request.business_name} was approved. You can now post jobs.",
        type=NotificationType.ROLE_APPROVED,
        related_id=request.id,
    )
    db.commit()
    db.refresh(request)

    logger.info(f"Role request {request.id} approved by admin {admin.id}")
    publish_notifications([notification])
    return request


def reject(db: Session, request_id: UUID, admin: User) -> RoleRequest:
    request = _get_pending_or_error(db, request_id)

    request.status = RoleRequestStatus.REJECTED
    request.reviewed_at = utcnow()
    request.reviewed_by = admin.id
    notification = queue_notification(
        db,
        request.user_id,
        "Organizer request declined",
        f"Your request for {request.business_name} was not approved.",
        type=NotificationType.ROLE_REJECTED,
        related_id=request.id,
    )
    db.commit()
    db.refresh(request)

    logger.info(f"Role request {request.id} rejected by admin {admin.id}")
    publish_notifications([notification])
    return request
