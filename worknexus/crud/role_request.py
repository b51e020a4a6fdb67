"""
CRUD operations for organizer role requests.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.models.role_request import RoleRequest, RoleRequestStatus
from worknexus.schemas.role_request import RoleRequestCreateRequest


def create(db: Session, user_id: UUID, data: RoleRequestCreateRequest) -> RoleRequest:
    request = RoleRequest(
        user_id=user_id,
        business_name=data.business_name.strip(),
        business_type=data.business_type.strip(),
        reason=data.reason.strip(),
        status=RoleRequestStatus.PENDING,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


def get_by_id(db: Session, request_id: UUID) -> Optional[RoleRequest]:
    return db.query(RoleRequest).filter(RoleRequest.id == request_id).first()


def get_pending_for_user(db: Session, user_id: UUID) -> Optional[RoleRequest]:
    return (
        db.query(RoleRequest)
        .filter(RoleRequest.user_id == user_id, RoleRequest.status == RoleRequestStatus.PENDING)
        .first()
    )


def get_by_user(db: Session, user_id: UUID) -> List[RoleRequest]:
    return (
        db.query(RoleRequest)
        .filter(RoleRequest.user_id == user_id)
        .order_by(RoleRequest.created_at.desc())
        .all()
    )


def get_multi(db: Session, status: Optional[RoleRequestStatus] = None) -> List[RoleRequest]:
    """All requests, newest first, optionally filtered by status."""
    query = db.query(RoleRequest)
    if status:
        query = query.filter(RoleRequest.status == status)
    return query.order_by(RoleRequest.created_at.desc()).all()


def count_pending(db: Session) -> int:
    return db.query(RoleRequest).filter(RoleRequest.status == RoleRequestStatus.PENDING).count()
