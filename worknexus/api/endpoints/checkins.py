"""
On-site endpoints for hired workers: QR check-in, check-out and SOS.
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.core.rate_limiter import check_sos_rate_limit
from worknexus.crud import checkin as checkin_crud
from worknexus.models.user import User
from worknexus.schemas.safety import (
    CheckinRequest,
    Coordinates,
    EmergencyContactResponse,
    QRCheckinResponse,
    SafetyCheckinResponse,
    SOSResponse,
)
from worknexus.services import checkins as checkin_service

router = APIRouter(prefix="/jobs/{job_id}", tags=["Check-ins"])


@router.get("/checkin", response_model=Optional[QRCheckinResponse])
def get_my_checkin(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's check-in for this job, or null if they haven't checked in."""
    return checkin_crud.get_qr_checkin(db, job_id, current_user.id)


@router.post("/checkin", status_code=201, response_model=QRCheckinResponse)
def check_in(
    job_id: UUID,
    request: CheckinRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Check in at the venue by submitting the scanned QR code and location.

    Arrivals after the job's start time are recorded as late.
    """
    return checkin_service.check_in(db, job_id, current_user, request)


@router.post("/checkout", response_model=QRCheckinResponse)
def check_out(
    job_id: UUID,
    request: Coordinates,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return checkin_service.check_out(db, job_id, current_user, request)


@router.post("/sos", status_code=201, response_model=SOSResponse)
def trigger_sos(
    job_id: UUID,
    request: Coordinates,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Raise an SOS alert. The job organizer is notified immediately and the
    caller's primary emergency contact is returned so the app can call them.
    """
    check_sos_rate_limit(str(current_user.id))
    sos, contact = checkin_service.trigger_sos(db, job_id, current_user, request)
    return SOSResponse(
        checkin=SafetyCheckinResponse.model_validate(sos),
        primary_contact=EmergencyContactResponse.model_validate(contact) if contact else None,
        message="SOS alert sent to the event organizer",
    )
