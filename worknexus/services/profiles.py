"""
Profile-derived views: the role-aware dashboard and the reliability summary.
"""

import logging
from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from worknexus.core.config import settings
from worknexus.core.storage import CONTENT_TYPES, StorageError, storage
from worknexus.crud import message as message_crud
from worknexus.crud import notification as notification_crud
from worknexus.crud import profile as profile_crud
from worknexus.models.application import ApplicationStatus, JobApplication
from worknexus.models.job import Job, JobStatus
from worknexus.models.profile import Profile
from worknexus.models.user import User
from worknexus.schemas.profile import DashboardResponse, DashboardStats, ProfileResponse, ReliabilityResponse

logger = logging.getLogger(__name__)

RELIABILITY_LABELS = [
    (95, "Excellent"),
    (85, "Great"),
    (70, "Good"),
    (50, "Fair"),
]


def reliability_label(score: int) -> str:
    for threshold, label in RELIABILITY_LABELS:
        if score >= threshold:
            return label
    return "Needs Improvement"


def get_profile_or_404(db: Session, user: User) -> Profile:
    profile = profile_crud.get_by_id(db, user.id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def reliability(profile: Profile) -> ReliabilityResponse:
    score = profile.reliability_score if profile.reliability_score is not None else 100
    return ReliabilityResponse(
        score=score,
        label=reliability_label(score),
        jobs_completed=profile.total_jobs_completed or 0,
        no_shows=profile.total_no_shows or 0,
        late_arrivals=profile.total_late_arrivals or 0,
        backup_pool_member=bool(profile.backup_pool_member),
    )


def organizer_stats(db: Session, user: User) -> DashboardStats:
    jobs = db.query(Job.status).filter(Job.organizer_id == user.id).all()
    return DashboardStats(
        total=len(jobs),
        active=sum(1 for (s,) in jobs if s == JobStatus.OPEN),
        completed=sum(1 for (s,) in jobs if s == JobStatus.COMPLETED),
    )


def worker_stats(db: Session, user: User) -> DashboardStats:
    """
    Application stats for a worker.

    "completed" counts accepted applications whose job has finished.
    """
    rows = (
        db.query(JobApplication.status, Job.status)
        .join(Job, Job.id == JobApplication.job_id)
        .filter(JobApplication.applicant_id == user.id)
        .all()
    )
    accepted = [job_status for app_status, job_status in rows if app_status == ApplicationStatus.ACCEPTED]
    return DashboardStats(
        total=len(rows),
        active=len(accepted),
        completed=sum(1 for job_status in accepted if job_status == JobStatus.COMPLETED),
    )


def dashboard(db: Session, user: User) -> DashboardResponse:
    profile = get_profile_or_404(db, user)
    stats = organizer_stats(db, user) if user.is_organizer else worker_stats(db, user)
    return DashboardResponse(
        role=user.role,
        profile=ProfileResponse.model_validate(profile),
        stats=stats,
        unread_notifications=notification_crud.unread_count(db, user.id),
        unread_messages=message_crud.unread_count(db, user.id),
    )


def upload_document(db: Session, user: User, file: UploadFile) -> Profile:
    """
    Store an identity document and queue the profile for verification.

    Raises:
        HTTPException 400: Unsupported file type or file too large
        HTTPException 500: Storage backend failure
    """
    filename = file.filename or ""
    extension = filename.lower().rsplit(".", 1)[-1] if "." in filename else ""
    if extension not in CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF, JPG and PNG files are supported"
        )

    contents = file.file.read()
    max_bytes = settings.MAX_DOCUMENT_SIZE_MB * 1024 * 1024
    if len(contents) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File must be smaller than {settings.MAX_DOCUMENT_SIZE_MB}MB"
        )
    file.file.seek(0)

    profile = get_profile_or_404(db, user)
    try:
        path = storage.upload_file(file.file, filename, folder=f"documents/{user.id}")
    except StorageError as e:
        logger.error(f"Failed to store verification document for {user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload document")

    profile = profile_crud.set_document(db, profile, path)
    logger.info(f"Verification document uploaded by user {user.id}")
    return profile
