"""
Profile endpoints: own profile, public profiles, verification documents,
reliability and ratings received.
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.crud import payment as payment_crud
from worknexus.crud import profile as profile_crud
from worknexus.crud import worker as worker_crud
from worknexus.models.user import User
from worknexus.models.worker import ActivityType
from worknexus.schemas.payment import RatingResponse
from worknexus.schemas.profile import (
    DocumentUploadResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    PublicProfile,
    ReliabilityResponse,
)
from worknexus.services import profiles as profile_service

router = APIRouter(prefix="/profiles", tags=["Profiles"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return profile_service.get_profile_or_404(db, current_user)


@router.patch("/me", response_model=ProfileResponse)
def update_my_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the current user's profile.

    Only the fields present in the body are changed.
    """
    profile = profile_service.get_profile_or_404(db, current_user)
    db.add(worker_crud.build_activity(current_user.id, ActivityType.PROFILE_UPDATE, "Updated profile"))
    profile = profile_crud.update(db, profile, request)

    logger.info(f"Profile updated for user {current_user.id}")
    return profile


@router.post("/me/documents", status_code=201, response_model=DocumentUploadResponse)
def upload_verification_document(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Upload an identity document (PDF, JPG or PNG, up to 5MB).

    The profile's verification status becomes "pending" until an admin
    reviews it.
    """
    profile = profile_service.upload_document(db, current_user, file)
    return DocumentUploadResponse(
        kyc_document_url=profile.kyc_document_url,
        verification_status=profile.verification_status,
        message="Document uploaded. Verification is pending review.",
    )


@router.get("/me/reliability", response_model=ReliabilityResponse)
def get_my_reliability(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    profile = profile_service.get_profile_or_404(db, current_user)
    return profile_service.reliability(profile)


@router.get("/{profile_id}", response_model=PublicProfile)
def get_public_profile(
    profile_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    profile = profile_crud.get_by_id(db, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.get("/{profile_id}/ratings", response_model=List[RatingResponse])
def get_profile_ratings(
    profile_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Ratings a user has received, newest first."""
    return payment_crud.get_ratings_for(db, profile_id)
