"""
Admin API endpoints: platform stats, identity verification and user roles.

Every route requires the admin role.
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_admin_user
from worknexus.crud import application as application_crud
from worknexus.crud import job as job_crud
from worknexus.crud import payment as payment_crud
from worknexus.crud import profile as profile_crud
from worknexus.crud import role_request as role_request_crud
from worknexus.crud import user as user_crud
from worknexus.models.profile import VerificationStatus
from worknexus.models.user import User
from worknexus.schemas.profile import (
    AdminStats,
    ProfileResponse,
    ProfileWithRoles,
    RoleChangeRequest,
    VerificationDecision,
)
from worknexus.schemas.user import UserResponse

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=AdminStats)
def get_stats(
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    return AdminStats(
        total_users=user_crud.count(db),
        total_jobs=job_crud.count(db),
        total_applications=application_crud.count(db),
        total_revenue=payment_crud.total_revenue(db),
        pending_verifications=len(profile_crud.get_pending_verifications(db)),
        pending_role_requests=role_request_crud.count_pending(db),
    )


@router.get("/verifications", response_model=List[ProfileResponse])
def list_pending_verifications(
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Profiles waiting for document review."""
    return profile_crud.get_pending_verifications(db)


@router.get("/users", response_model=List[ProfileWithRoles])
def list_users(
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Latest 50 users with their roles."""
    profiles = profile_crud.get_latest(db, limit=50)
    roles = user_crud.roles_for_users(db, [p.id for p in profiles])
    return [
        ProfileWithRoles(**ProfileResponse.model_validate(p).model_dump(), roles=roles.get(p.id, []))
        for p in profiles
    ]


@router.post("/users/{user_id}/verification", response_model=ProfileResponse)
def decide_verification(
    user_id: UUID,
    request: VerificationDecision,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    if request.status == VerificationStatus.PENDING:
        raise HTTPException(status_code=400, detail="Status must be verified or rejected")

    profile = profile_crud.get_by_id(db, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")

    profile = profile_crud.set_verification_status(db, profile, request.status)
    logger.info(f"Admin {admin_user.id} marked user {user_id} as {request.status.value}")
    return profile


@router.put("/users/{user_id}/role", response_model=UserResponse)
def change_role(
    user_id: UUID,
    request: RoleChangeRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Replace all of the user's roles with the given one."""
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user_crud.set_role(db, user.id, request.role)
    logger.info(f"Admin {admin_user.id} set role of user {user_id} to {request.role.value}")
    return user_crud.get_by_id(db, user_id)
