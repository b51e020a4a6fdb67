import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_organizer_user
from worknexus.core.timeutils import as_utc
from worknexus.crud import job as job_crud
from worknexus.crud import worker as worker_crud
from worknexus.models.job import Job, JobStatus
from worknexus.models.user import User
from worknexus.models.worker import ActivityType
from worknexus.schemas.job import JobCreateRequest, JobResponse, JobStatusUpdateRequest, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def _get_owned_job(db: Session, job_id: UUID, user: User) -> Job:
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if job.organizer_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="You can only manage your own jobs")
    return job


@router.post("", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    """
    Post a new job. Requires the organizer role.

    The job is open for applications immediately unless posted as a draft.
    """
    new_job = job_crud.create(db, current_user.id, request)
    db.add(worker_crud.build_activity(
        current_user.id, ActivityType.JOB_POSTED, f"Posted {new_job.title}", related_id=new_job.id
    ))
    db.commit()
    db.refresh(new_job)

    logger.info(f"Created job {new_job.id}: {new_job.title} by organizer {current_user.id}")
    return new_job


@router.get("", response_model=List[JobResponse])
def browse_jobs(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    city: Optional[str] = None,
    event_type: Optional[str] = None,
    is_urgent: Optional[bool] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Browse open jobs. Urgent postings are listed first, then newest.

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100, max: 100)
        city: Filter by city (case-insensitive)
        event_type: Filter by event type
        is_urgent: Only urgent (or only non-urgent) postings
        search: Text to look for in title or description
    """
    return job_crud.get_open(
        db, skip=skip, limit=limit, city=city, event_type=event_type, is_urgent=is_urgent, search=search
    )


@router.get("/mine", response_model=List[JobResponse])
def list_my_jobs(
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    """Jobs posted by the current organizer, newest first."""
    return job_crud.get_by_organizer(db, current_user.id)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: UUID, db: Session = Depends(get_db)):
    job = job_crud.get_by_id(db, job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: UUID,
    request: JobUpdateRequest,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    job = _get_owned_job(db, job_id, current_user)

    start = request.start_date or job.start_date
    end = request.end_date or job.end_date
    if as_utc(end) <= as_utc(start):
        raise HTTPException(status_code=400, detail="End date must be after start date")
    if request.workers_needed is not None and request.workers_needed < (job.workers_hired or 0):
        raise HTTPException(status_code=400, detail="Cannot need fewer workers than already hired")

    job = job_crud.update(db, job, request)
    logger.info(f"Updated job {job.id}")
    return job


@router.patch("/{job_id}/status", response_model=JobResponse)
def update_job_status(
    job_id: UUID,
    request: JobStatusUpdateRequest,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    job = _get_owned_job(db, job_id, current_user)
    job = job_crud.update_status(db, job, JobStatus(request.status.value))

    logger.info(f"Job {job.id} status set to {job.status.value}")
    return job


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: UUID,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    job = _get_owned_job(db, job_id, current_user)
    job_crud.delete(db, job)

    logger.info(f"Deleted job {job_id}")
    return None
