"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for job postings, providing a clean interface for the API layer.
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session

from worknexus.models.job import Job, JobStatus
from worknexus.schemas.job import JobCreateRequest, JobUpdateRequest


def create(db: Session, organizer_id: UUID, job_data: JobCreateRequest) -> Job:
    """
    Create a new job posting.

    Args:
        db: Database session
        organizer_id: Posting organizer
        job_data: Validated job creation data

    Returns:
        Created Job instance with id
    """
    fields = job_data.model_dump(exclude={"status"})
    db_job = Job(
        organizer_id=organizer_id,
        status=JobStatus(job_data.status.value),
        workers_hired=0,
        **fields
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: UUID) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_many(db: Session, job_ids: Iterable[UUID]) -> Dict[UUID, Job]:
    """Fetch several jobs in one IN query, keyed by id."""
    ids = list(set(job_ids))
    if not ids:
        return {}
    return {j.id: j for j in db.query(Job).filter(Job.id.in_(ids)).all()}


def get_open(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    city: Optional[str] = None,
    event_type: Optional[str] = None,
    is_urgent: Optional[bool] = None,
    search: Optional[str] = None,
) -> List[Job]:
    """
    Browse open jobs with pagination and optional filtering.

    Urgent postings come first, then newest.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return
        city: Case-insensitive exact city match
        event_type: Exact event type match
        is_urgent: Restrict to (non-)urgent postings
        search: Substring match on title or description

    Returns:
        List of Job instances
    """
    query = db.query(Job).filter(Job.status == JobStatus.OPEN)

    if city:
        query = query.filter(Job.city.ilike(city.strip()))
    if event_type:
        query = query.filter(Job.event_type == event_type)
    if is_urgent is not None:
        query = query.filter(Job.is_urgent == is_urgent)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Job.title.ilike(pattern), Job.description.ilike(pattern)))

    return (
        query.order_by(Job.is_urgent.desc(), Job.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_by_organizer(db: Session, organizer_id: UUID) -> List[Job]:
    """All jobs posted by an organizer, newest first."""
    return (
        db.query(Job)
        .filter(Job.organizer_id == organizer_id)
        .order_by(Job.created_at.desc())
        .all()
    )


def update(db: Session, job: Job, job_data: JobUpdateRequest) -> Job:
    """Apply only the fields the client sent."""
    for field, value in job_data.model_dump(exclude_unset=True).items():
        setattr(job, field, value)

    db.commit()
    db.refresh(job)
    return job


def update_status(db: Session, job: Job, status: JobStatus) -> Job:
    job.status = status
    db.commit()
    db.refresh(job)
    return job


def delete(db: Session, job: Job) -> None:
    db.delete(job)
    db.commit()


def count(db: Session) -> int:
    return db.query(Job).count()
