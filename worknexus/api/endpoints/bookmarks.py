import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.crud import bookmark as bookmark_crud
from worknexus.crud import job as job_crud
from worknexus.models.user import User
from worknexus.schemas.job import BookmarkCreateRequest, BookmarkResponse, BookmarkToggleResponse, JobResponse

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])
logger = logging.getLogger(__name__)


def _require_job(db: Session, job_id: UUID) -> None:
    if not job_crud.get_by_id(db, job_id):
        raise HTTPException(status_code=404, detail="Job not found")


@router.get("", response_model=List[BookmarkResponse])
def list_bookmarks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Saved jobs, newest first."""
    bookmarks = bookmark_crud.get_by_user(db, current_user.id)
    jobs = job_crud.get_many(db, (b.job_id for b in bookmarks))
    return [
        BookmarkResponse(
            id=b.id,
            job_id=b.job_id,
            created_at=b.created_at,
            job=JobResponse.model_validate(jobs[b.job_id]) if b.job_id in jobs else None,
        )
        for b in bookmarks
    ]


@router.post("", status_code=201, response_model=BookmarkResponse)
def create_bookmark(
    request: BookmarkCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    _require_job(db, request.job_id)
    if bookmark_crud.get_for_user_and_job(db, current_user.id, request.job_id):
        raise HTTPException(status_code=409, detail="Job already saved")

    try:
        bookmark = bookmark_crud.create(db, current_user.id, request.job_id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Job already saved")

    return BookmarkResponse(id=bookmark.id, job_id=bookmark.job_id, created_at=bookmark.created_at)


@router.post("/toggle/{job_id}", response_model=BookmarkToggleResponse)
def toggle_bookmark(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save the job if it isn't saved yet, otherwise remove it."""
    _require_job(db, job_id)
    existing = bookmark_crud.get_for_user_and_job(db, current_user.id, job_id)
    if existing:
        bookmark_crud.delete(db, existing)
        return BookmarkToggleResponse(job_id=job_id, bookmarked=False)

    try:
        bookmark_crud.create(db, current_user.id, job_id)
    except IntegrityError:
        # A concurrent toggle saved it first
        db.rollback()
    return BookmarkToggleResponse(job_id=job_id, bookmarked=True)


@router.delete("/{bookmark_id}", status_code=204)
def delete_bookmark(
    bookmark_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    bookmark = bookmark_crud.get_by_id(db, bookmark_id)
    if not bookmark:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    if bookmark.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not your bookmark")

    bookmark_crud.delete(db, bookmark)
    return None
