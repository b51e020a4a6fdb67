"""
API endpoints for job applications.

Workers apply, list and withdraw; organizers see applicants per job and
accept or reject them.
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user, get_organizer_user
from worknexus.core.rate_limiter import check_application_rate_limit
from worknexus.models.user import User
from worknexus.schemas.application import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationReviewRequest,
    ApplicationWithJob,
    JobWithApplications,
)
from worknexus.services import applications as application_service

router = APIRouter(tags=["Applications"])
logger = logging.getLogger(__name__)


@router.post("/jobs/{job_id}/applications", status_code=201, response_model=ApplicationResponse)
def apply_to_job(
    job_id: UUID,
    request: ApplicationCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Apply to an open job.

    Raises:
        HTTPException 400: Empty cover letter, job closed, or own job
        HTTPException 404: Job doesn't exist
        HTTPException 409: Already applied
        HTTPException 429: Too many applications in a short time
    """
    check_application_rate_limit(str(current_user.id))
    return application_service.submit_application(db, job_id, current_user, request)


@router.get("/applications/me", response_model=List[ApplicationWithJob])
def list_my_applications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's applications, newest first, each with its job."""
    return application_service.list_for_applicant(db, current_user)


@router.post("/applications/{application_id}/withdraw", response_model=ApplicationResponse)
def withdraw_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return application_service.withdraw_application(db, application_id, current_user)


@router.get("/applications/manage", response_model=List[JobWithApplications])
def manage_applications(
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    """
    Organizer view: every posted job with its applicants.

    Each application carries the applicant's public profile and an
    `above_budget` flag when the expected wage exceeds the job's rate.
    """
    return application_service.manage_view(db, current_user)


@router.patch("/applications/{application_id}/review", response_model=ApplicationResponse)
def review_application(
    application_id: UUID,
    request: ApplicationReviewRequest,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    return application_service.review_application(db, application_id, current_user, request.status)
