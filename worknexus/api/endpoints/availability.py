import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.crud import worker as worker_crud
from worknexus.models.user import User
from worknexus.schemas.worker import AvailabilitySlot, AvailabilityUpdateRequest
from worknexus.services.tools import full_week

router = APIRouter(prefix="/availability", tags=["Availability"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[AvailabilitySlot])
def get_availability(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    The worker's weekly schedule, Sunday (0) to Saturday (6).

    Days never saved default to 09:00-18:00, with Sunday off.
    """
    return full_week(worker_crud.get_availability(db, current_user.id))


@router.put("", response_model=List[AvailabilitySlot])
def replace_availability(
    request: AvailabilityUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Replace the whole stored schedule with the given slots."""
    rows = worker_crud.replace_availability(db, current_user.id, request.slots)
    logger.info(f"Availability updated for user {current_user.id} ({len(rows)} day(s))")
    return full_week(rows)
