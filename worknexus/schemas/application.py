from pydantic import BaseModel, Field, UUID4
from typing import List, Optional
from datetime import datetime
from enum import Enum

from worknexus.schemas.job import JobResponse
from worknexus.schemas.profile import PublicProfile


class ApplicationStatusEnum(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ReviewDecision(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ApplicationCreateRequest(BaseModel):
    """
    Apply-form payload.

    cover_letter is required but blank text is rejected by the service
    (400) rather than by schema validation, so the client gets a
    form-level message.
    """
    cover_letter: str = Field(..., max_length=5000)
    availability: Optional[str] = Field(None, max_length=500)
    expected_wage: Optional[float] = Field(None, gt=0)
    years_experience: Optional[int] = Field(None, ge=0, le=60)


class ApplicationReviewRequest(BaseModel):
    status: ReviewDecision


class ApplicationResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    applicant_id: UUID4
    cover_letter: str
    availability: Optional[str] = None
    expected_wage: Optional[float] = None
    years_experience: Optional[int] = None
    status: ApplicationStatusEnum
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID4] = None

    class Config:
        from_attributes = True


class ApplicationWithJob(ApplicationResponse):
    """Applicant's view: the application plus the job it targets."""
    job: Optional[JobResponse] = None


class ApplicationWithApplicant(ApplicationResponse):
    """Organizer's view: the application plus the applicant's public profile."""
    applicant: Optional[PublicProfile] = None
    above_budget: bool = False


class JobWithApplications(JobResponse):
    applications: List[ApplicationWithApplicant] = []
    has_pending: bool = False
