import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.crud import worker as worker_crud
from worknexus.models.user import User
from worknexus.schemas.worker import SkillResponse, UserSkillResponse, UserSkillsUpdateRequest

router = APIRouter(prefix="/skills", tags=["Skills"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[SkillResponse])
def list_skills(category: Optional[str] = None, db: Session = Depends(get_db)):
    """Skill catalog, alphabetical."""
    return worker_crud.get_skills(db, category=category)


@router.get("/me", response_model=List[UserSkillResponse])
def list_my_skills(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return worker_crud.get_user_skills(db, current_user.id)


@router.put("/me", response_model=List[UserSkillResponse])
def replace_my_skills(
    request: UserSkillsUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    requested = [entry.skill_id for entry in request.skills]
    if len(requested) != len(set(requested)):
        raise HTTPException(status_code=400, detail="Each skill may be listed only once")
    missing = set(requested) - worker_crud.get_skill_ids(db, requested)
    if missing:
        raise HTTPException(status_code=404, detail="Skill not found")

    skills = worker_crud.replace_user_skills(db, current_user.id, request.skills)
    logger.info(f"Skills updated for user {current_user.id}")
    return skills
