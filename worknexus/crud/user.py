"""
CRUD operations for User accounts and their roles.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.core.security import get_password_hash
from worknexus.core.timeutils import utcnow
from worknexus.models.profile import Profile
from worknexus.models.user import AppRole, User, UserRole


def get_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create(db: Session, email: str, password: str, full_name: Optional[str] = None) -> User:
    """
    Create a user with an empty profile and the default worker role.

    Args:
        db: Database session
        email: Login email (stored lower-cased)
        password: Plain password, hashed before storage
        full_name: Optional display name copied to the profile

    Returns:
        Created User with profile and roles loaded
    """
    user = User(
        email=email.lower(),
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    db.add(user)
    db.flush()  # Flush to get user.id for the profile/role FKs

    db.add(Profile(id=user.id, full_name=full_name))
    db.add(UserRole(user_id=user.id, role=AppRole.USER))
    db.commit()
    db.refresh(user)

    return user


def touch_login(db: Session, user: User) -> None:
    user.last_login_at = utcnow()
    db.commit()


def add_role(db: Session, user_id: UUID, role: AppRole) -> bool:
    """
    Grant a role unless the user already holds it.

    Returns:
        True if a row was inserted, False if the role already existed
    """
    exists = db.query(UserRole).filter(UserRole.user_id == user_id, UserRole.role == role).first()
    if exists:
        return False
    db.add(UserRole(user_id=user_id, role=role))
    return True


def set_role(db: Session, user_id: UUID, role: AppRole) -> None:
    """Replace all of a user's roles with a single role."""
    db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session=False)
    db.add(UserRole(user_id=user_id, role=role))
    db.commit()
    db.expire_all()


def roles_for_users(db: Session, user_ids: List[UUID]) -> dict:
    """Map user id -> list of roles, for the users given."""
    if not user_ids:
        return {}
    result = {user_id: [] for user_id in user_ids}
    for row in db.query(UserRole).filter(UserRole.user_id.in_(user_ids)).all():
        result[row.user_id].append(row.role)
    return result


def count(db: Session) -> int:
    return db.query(User).count()
