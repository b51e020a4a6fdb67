"""
CRUD operations for Profile rows.
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.models.profile import Profile, VerificationStatus
from worknexus.schemas.profile import ProfileUpdateRequest


def get_by_id(db: Session, profile_id: UUID) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == profile_id).first()


def get_many(db: Session, profile_ids: Iterable[UUID]) -> Dict[UUID, Profile]:
    """
    Fetch several profiles in one IN query.

    Returns:
        Mapping of profile id -> Profile (missing ids are simply absent)
    """
    ids = list(set(profile_ids))
    if not ids:
        return {}
    return {p.id: p for p in db.query(Profile).filter(Profile.id.in_(ids)).all()}


def update(db: Session, profile: Profile, data: ProfileUpdateRequest) -> Profile:
    """Apply only the fields the client sent."""
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    return profile


def set_document(db: Session, profile: Profile, document_url: str) -> Profile:
    """Attach a verification document and queue the profile for admin review."""
    profile.kyc_document_url = document_url
    profile.verification_status = VerificationStatus.PENDING
    db.commit()
    db.refresh(profile)
    return profile


def set_verification_status(db: Session, profile: Profile, status: VerificationStatus) -> Profile:
    profile.verification_status = status
    db.commit()
    db.refresh(profile)
    return profile


def get_pending_verifications(db: Session) -> List[Profile]:
    return (
        db.query(Profile)
        .filter(Profile.verification_status == VerificationStatus.PENDING)
        .order_by(Profile.created_at.desc())
        .all()
    )


def get_latest(db: Session, limit: int = 50) -> List[Profile]:
    return db.query(Profile).order_by(Profile.created_at.desc()).limit(limit).all()
