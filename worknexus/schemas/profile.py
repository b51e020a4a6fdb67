from pydantic import BaseModel, Field, UUID4, field_validator
from typing import List, Optional
from datetime import date, datetime

from worknexus.models.profile import VerificationStatus
from worknexus.models.user import AppRole


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left untouched."""
    full_name: Optional[str] = Field(None, max_length=120)
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=2000)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, max_length=10)
    date_of_birth: Optional[date] = None
    college_name: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = Field(None, max_length=20)
    is_available: Optional[bool] = None
    night_shift_opted_out: Optional[bool] = None
    working_radius_km: Optional[int] = Field(None, ge=5, le=100)
    backup_pool_member: Optional[bool] = None

    @field_validator("is_available", "night_shift_opted_out", "working_radius_km", "backup_pool_member")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("This field cannot be null")
        return v


class PublicProfile(BaseModel):
    """Fields other users may see (applicant cards, chat headers)."""
    id: UUID4
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    rating: float = 0.0
    total_jobs_completed: int = 0
    verification_status: Optional[VerificationStatus] = None

    class Config:
        from_attributes = True


class ProfileResponse(PublicProfile):
    bio: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    date_of_birth: Optional[date] = None
    college_name: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    is_available: bool = True
    kyc_document_url: Optional[str] = None
    reliability_score: int = 100
    total_no_shows: int = 0
    total_late_arrivals: int = 0
    backup_pool_member: bool = False
    night_shift_opted_out: bool = False
    working_radius_km: int = 25
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileWithRoles(ProfileResponse):
    roles: List[AppRole] = []


class ReliabilityResponse(BaseModel):
    score: int
    label: str
    jobs_completed: int
    no_shows: int
    late_arrivals: int
    backup_pool_member: bool


class DashboardStats(BaseModel):
    total: int
    active: int
    completed: int


class DashboardResponse(BaseModel):
    role: AppRole
    profile: ProfileResponse
    stats: DashboardStats
    unread_notifications: int
    unread_messages: int


class DocumentUploadResponse(BaseModel):
    kyc_document_url: str
    verification_status: VerificationStatus
    message: str


class VerificationDecision(BaseModel):
    status: VerificationStatus


class RoleChangeRequest(BaseModel):
    role: AppRole


class AdminStats(BaseModel):
    total_users: int
    total_jobs: int
    total_applications: int
    total_revenue: float
    pending_verifications: int
    pending_role_requests: int


class UnreadCounts(BaseModel):
    unread_notifications: int
    unread_messages: int

