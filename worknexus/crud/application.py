"""
CRUD operations for JobApplication model.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.models.application import ApplicationStatus, JobApplication


def get_by_id(db: Session, application_id: UUID) -> Optional[JobApplication]:
    return db.query(JobApplication).filter(JobApplication.id == application_id).first()


def get_for_job_and_applicant(db: Session, job_id: UUID, applicant_id: UUID) -> Optional[JobApplication]:
    return (
        db.query(JobApplication)
        .filter(JobApplication.job_id == job_id, JobApplication.applicant_id == applicant_id)
        .first()
    )


def get_by_applicant(db: Session, applicant_id: UUID) -> List[JobApplication]:
    """An applicant's applications, newest first."""
    return (
        db.query(JobApplication)
        .filter(JobApplication.applicant_id == applicant_id)
        .order_by(JobApplication.applied_at.desc())
        .all()
    )


def get_for_jobs(db: Session, job_ids: List[UUID]) -> List[JobApplication]:
    """
    Applications for a set of jobs in a single IN query, newest first.

    Args:
        db: Database session
        job_ids: Jobs to collect applications for

    Returns:
        List of JobApplication instances (empty when job_ids is empty)
    """
    if not job_ids:
        return []
    return (
        db.query(JobApplication)
        .filter(JobApplication.job_id.in_(job_ids))
        .order_by(JobApplication.applied_at.desc())
        .all()
    )


def is_accepted(db: Session, job_id: UUID, applicant_id: UUID) -> bool:
    return (
        db.query(JobApplication.id)
        .filter(
            JobApplication.job_id == job_id,
            JobApplication.applicant_id == applicant_id,
            JobApplication.status == ApplicationStatus.ACCEPTED,
        )
        .first()
        is not None
    )


def count(db: Session) -> int:
    return db.query(JobApplication).count()
