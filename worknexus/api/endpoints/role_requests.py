"""
Organizer role requests.

Workers submit a request describing their business; admins approve or
reject it. Approval grants the organizer role.
"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_admin_user, get_current_user
from worknexus.crud import role_request as role_request_crud
from worknexus.models.role_request import RoleRequestStatus
from worknexus.models.user import User
from worknexus.schemas.role_request import RoleRequestCreateRequest, RoleRequestResponse, RoleRequestWithUser
from worknexus.services import role_requests as role_request_service

router = APIRouter(prefix="/role-requests", tags=["Role Requests"])


@router.post("", status_code=201, response_model=RoleRequestResponse)
def submit_role_request(
    request: RoleRequestCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return role_request_service.submit(db, current_user, request)


@router.get("/me", response_model=List[RoleRequestResponse])
def list_my_role_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return role_request_crud.get_by_user(db, current_user.id)


@router.get("", response_model=List[RoleRequestWithUser])
def list_role_requests(
    status: Optional[RoleRequestStatus] = None,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """All requests with the requester's profile, newest first."""
    return role_request_service.list_with_users(db, status)


@router.post("/{request_id}/approve", response_model=RoleRequestResponse)
def approve_role_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    return role_request_service.approve(db, request_id, admin_user)


@router.post("/{request_id}/reject", response_model=RoleRequestResponse)
def reject_role_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    return role_request_service.reject(db, request_id, admin_user)
