"""
CRUD operations for worker availability, skills and the activity log.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from worknexus.models.worker import Skill, UserActivity, UserSkill, WorkerAvailability
from worknexus.schemas.worker import AvailabilitySlot, UserSkillEntry


def get_availability(db: Session, user_id: UUID) -> List[WorkerAvailability]:
    return (
        db.query(WorkerAvailability)
        .filter(WorkerAvailability.user_id == user_id)
        .order_by(WorkerAvailability.day_of_week.asc())
        .all()
    )


def replace_availability(db: Session, user_id: UUID, slots: List[AvailabilitySlot]) -> List[WorkerAvailability]:
    """Delete the user's stored week and insert the given slots."""
    db.query(WorkerAvailability).filter(WorkerAvailability.user_id == user_id).delete(synchronize_session=False)
    db.add_all([
        WorkerAvailability(
            user_id=user_id,
            day_of_week=slot.day_of_week,
            is_available=slot.is_available,
            start_time=slot.start_time,
            end_time=slot.end_time,
        )
        for slot in slots
    ])
    db.commit()
    return get_availability(db, user_id)


def get_skills(db: Session, category: Optional[str] = None) -> List[Skill]:
    query = db.query(Skill)
    if category:
        query = query.filter(Skill.category == category)
    return query.order_by(Skill.name.asc()).all()


def get_skill_ids(db: Session, skill_ids: List[UUID]) -> set:
    if not skill_ids:
        return set()
    return {row.id for row in db.query(Skill.id).filter(Skill.id.in_(skill_ids)).all()}


def get_user_skills(db: Session, user_id: UUID) -> List[UserSkill]:
    return (
        db.query(UserSkill)
        .options(joinedload(UserSkill.skill))
        .filter(UserSkill.user_id == user_id)
        .all()
    )


def replace_user_skills(db: Session, user_id: UUID, entries: List[UserSkillEntry]) -> List[UserSkill]:
    db.query(UserSkill).filter(UserSkill.user_id == user_id).delete(synchronize_session=False)
    db.add_all([
        UserSkill(
            user_id=user_id,
            skill_id=entry.skill_id,
            proficiency_level=entry.proficiency_level,
            years_of_experience=entry.years_of_experience,
        )
        for entry in entries
    ])
    db.commit()
    return get_user_skills(db, user_id)


def build_activity(user_id: UUID, activity_type: str, description: str, related_id: Optional[UUID] = None) -> UserActivity:
    """Construct an unsaved activity row; the caller commits it with the action it records."""
    return UserActivity(user_id=user_id, activity_type=activity_type, description=description, related_id=related_id)


def get_activity(db: Session, user_id: UUID, limit: int = 50) -> List[UserActivity]:
    return (
        db.query(UserActivity)
        .filter(UserActivity.user_id == user_id)
        .order_by(UserActivity.created_at.desc())
        .limit(limit)
        .all()
    )
