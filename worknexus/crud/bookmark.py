"""
CRUD operations for saved jobs (bookmarks).
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.models.job import JobBookmark


def get_by_id(db: Session, bookmark_id: UUID) -> Optional[JobBookmark]:
    return db.query(JobBookmark).filter(JobBookmark.id == bookmark_id).first()


def get_for_user_and_job(db: Session, user_id: UUID, job_id: UUID) -> Optional[JobBookmark]:
    return (
        db.query(JobBookmark)
        .filter(JobBookmark.user_id == user_id, JobBookmark.job_id == job_id)
        .first()
    )


def get_by_user(db: Session, user_id: UUID) -> List[JobBookmark]:
    """A user's bookmarks, newest first."""
    return (
        db.query(JobBookmark)
        .filter(JobBookmark.user_id == user_id)
        .order_by(JobBookmark.created_at.desc())
        .all()
    )


def create(db: Session, user_id: UUID, job_id: UUID) -> JobBookmark:
    bookmark = JobBookmark(user_id=user_id, job_id=job_id)
    db.add(bookmark)
    db.commit()
    db.refresh(bookmark)
    return bookmark


def delete(db: Session, bookmark: JobBookmark) -> None:
    db.delete(bookmark)
    db.commit()
