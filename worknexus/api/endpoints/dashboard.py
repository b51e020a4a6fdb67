from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.models.user import User
from worknexus.schemas.profile import DashboardResponse
from worknexus.services import profiles as profile_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Landing page data.

    Organizers (and admins) see stats over the jobs they posted; workers see
    stats over their applications.
    """
    return profile_service.dashboard(db, current_user)
