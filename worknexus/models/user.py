"""
User account and role models.

A User is the authentication identity. Its public-facing data lives in the
Profile row sharing the same id, and its privileges in one or more
UserRole rows.
"""

import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from worknexus.core.database import Base


class AppRole(str, enum.Enum):
    """Privilege levels, lowest first."""
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"


ROLE_PRECEDENCE = {AppRole.USER: 0, AppRole.ORGANIZER: 1, AppRole.ADMIN: 2}


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self):
        return self.profile.full_name if self.profile else None

    @property
    def role(self) -> AppRole:
        """Highest role held by the user; users without rows are plain users."""
        if not self.roles:
            return AppRole.USER
        return max((r.role for r in self.roles), key=lambda r: ROLE_PRECEDENCE[r])

    @property
    def is_organizer(self) -> bool:
        return self.role in (AppRole.ORGANIZER, AppRole.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == AppRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(AppRole), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="roles")
