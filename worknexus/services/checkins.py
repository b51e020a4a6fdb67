"""
On-site attendance: QR check-in/out and SOS alerts.

Coordinates sent by the device are stored with each event but not checked
against the job location.
"""

import logging
from typing import Optional, Tuple
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worknexus.core.timeutils import as_utc, utcnow
from worknexus.crud import application as application_crud
from worknexus.crud import checkin as checkin_crud
from worknexus.crud import job as job_crud
from worknexus.crud import profile as profile_crud
from worknexus.crud import worker as worker_crud
from worknexus.models.checkin import CheckinType, EmergencyContact, QRCheckin, SafetyCheckin
from worknexus.models.job import Job
from worknexus.models.notification import NotificationType
from worknexus.models.user import User
from worknexus.models.worker import ActivityType
from worknexus.schemas.safety import CheckinRequest, Coordinates
from worknexus.services.notifications import publish_notifications, queue_notification

logger = logging.getLogger(__name__)

SOS_NOTE = "Emergency SOS triggered"


def minutes_late(start_date, checked_in_at) -> int:
    """Whole minutes between the scheduled start and the check-in, never negative."""
    delta = as_utc(checked_in_at) - as_utc(start_date)
    return max(0, int(delta.total_seconds() // 60))


def _get_job_or_404(db: Session, job_id: UUID) -> Job:
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return job


def check_in(db: Session, job_id: UUID, worker: User, data: CheckinRequest) -> QRCheckin:
    """
    Record a worker's arrival at a job.

    Raises:
        HTTPException 400: Blank QR code
        HTTPException 403: Worker is not hired for the job
        HTTPException 404: Job not found
        HTTPException 409: Already checked in
    """
    qr_code = data.qr_code.strip()
    if not qr_code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="QR code is required")

    job = _get_job_or_404(db, job_id)
    if not application_crud.is_accepted(db, job.id, worker.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not hired for this job")
    if checkin_crud.get_qr_checkin(db, job.id, worker.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already checked in for this job")

    now = utcnow()
    late_by = minutes_late(job.start_date, now)
    checkin = QRCheckin(
        job_id=job.id,
        worker_id=worker.id,
        qr_code=qr_code,
        checked_in_at=now,
        is_late=late_by > 0,
        minutes_late=late_by,
    )
    db.add(checkin)
    db.add(checkin_crud.build_safety_checkin(
        worker.id, job.id, data.latitude, data.longitude, CheckinType.START
    ))
    db.add(worker_crud.build_activity(worker.id, ActivityType.CHECK_IN, f"Checked in at {job.title}", related_id=job.id))

    if late_by > 0:
        profile = profile_crud.get_by_id(db, worker.id)
        if profile:
            profile.total_late_arrivals = (profile.total_late_arrivals or 0) + 1

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already checked in for this job")

    db.refresh(checkin)
    logger.info(f"Worker {worker.id} checked in to job {job.id} ({late_by} min late)")
    return checkin


def check_out(db: Session, job_id: UUID, worker: User, coords: Coordinates) -> QRCheckin:
    job = _get_job_or_404(db, job_id)
    checkin = checkin_crud.get_qr_checkin(db, job.id, worker.id)
    if not checkin:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You have not checked in for this job")
    if checkin.checked_out_at is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already checked out")

    checkin.checked_out_at = utcnow()
    db.add(checkin_crud.build_safety_checkin(
        worker.id, job.id, coords.latitude, coords.longitude, CheckinType.END
    ))
    db.commit()
    db.refresh(checkin)

    logger.info(f"Worker {worker.id} checked out of job {job.id}")
    return checkin


def trigger_sos(
    db: Session, job_id: UUID, user: User, coords: Coordinates
) -> Tuple[SafetyCheckin, Optional[EmergencyContact]]:
    """
    Log an SOS alert for a job and alert its organizer.

    Returns:
        The stored safety check-in and the user's primary emergency contact
        (None when the user has not set one)
    """
    job = _get_job_or_404(db, job_id)

    sos = checkin_crud.build_safety_checkin(
        user.id, job.id, coords.latitude, coords.longitude, CheckinType.SOS, notes=SOS_NOTE
    )
    db.add(sos)
    notification = queue_notification(
        db,
        job.organizer_id,
        "SOS alert",
        f"{user.full_name or 'A worker'} triggered an SOS at {job.title} "
        f"({coords.latitude:.5f}, {coords.longitude:.5f})",
        type=NotificationType.SOS_ALERT,
        related_id=job.id,
    )
    db.commit()
    db.refresh(sos)

    logger.warning(f"SOS triggered by user {user.id} for job {job.id}")
    publish_notifications([notification])

    return sos, checkin_crud.get_primary_contact(db, user.id)
