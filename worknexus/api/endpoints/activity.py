from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.crud import worker as worker_crud
from worknexus.models.user import User
from worknexus.schemas.worker import ActivityResponse

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("", response_model=List[ActivityResponse])
def list_activity(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's latest 50 actions, newest first."""
    return worker_crud.get_activity(db, current_user.id, limit=50)
