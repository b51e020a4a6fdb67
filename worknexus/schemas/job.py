from pydantic import BaseModel, Field, UUID4, field_validator, model_validator
from typing import List, Optional, Union
from datetime import datetime
from enum import Enum


class JobStatusEnum(str, Enum):
    """Job posting status"""
    DRAFT = "draft"
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _split_requirements(v: Union[str, List[str], None]) -> Optional[List[str]]:
    """Accept a list or a comma-separated string; trim entries and drop empties."""
    if v is None:
        return None
    items = v.split(",") if isinstance(v, str) else v
    return [item.strip() for item in items if item and item.strip()]


class JobBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10)
    event_type: Optional[str] = None
    location: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    start_date: datetime
    end_date: datetime
    total_hours: Optional[float] = Field(None, gt=0)
    workers_needed: int = Field(..., ge=1)
    wage_per_hour: float = Field(..., gt=0)
    is_urgent: bool = False
    meal_provided: bool = False
    transportation_provided: bool = False
    dress_code: Optional[str] = None
    requirements: List[str] = []

    @field_validator("requirements", mode="before")
    @classmethod
    def normalize_requirements(cls, v):
        return _split_requirements(v) or []


class JobCreateRequest(JobBase):
    """Schema for posting a new job"""
    status: JobStatusEnum = JobStatusEnum.OPEN

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class JobUpdateRequest(BaseModel):
    """Partial update of a job posting by its organizer"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    event_type: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_hours: Optional[float] = Field(None, gt=0)
    workers_needed: Optional[int] = Field(None, ge=1)
    wage_per_hour: Optional[float] = Field(None, gt=0)
    is_urgent: Optional[bool] = None
    meal_provided: Optional[bool] = None
    transportation_provided: Optional[bool] = None
    dress_code: Optional[str] = None
    requirements: Optional[List[str]] = None

    @field_validator("requirements", mode="before")
    @classmethod
    def normalize_requirements(cls, v):
        return _split_requirements(v)

    @field_validator(
        "title", "description", "location", "city", "start_date", "end_date", "workers_needed",
        "wage_per_hour", "is_urgent", "meal_provided", "transportation_provided", "requirements",
    )
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("This field cannot be null")
        return v


class JobStatusUpdateRequest(BaseModel):
    status: JobStatusEnum


class JobResponse(BaseModel):
    """Schema for job response"""
    id: UUID4
    organizer_id: UUID4
    title: str
    description: str
    event_type: Optional[str] = None
    location: str
    city: str
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    start_date: datetime
    end_date: datetime
    total_hours: Optional[float] = None
    workers_needed: int
    workers_hired: int
    wage_per_hour: float
    is_urgent: bool
    meal_provided: bool
    transportation_provided: bool
    dress_code: Optional[str] = None
    requirements: List[str] = []
    status: JobStatusEnum
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models


class BookmarkCreateRequest(BaseModel):
    job_id: UUID4


class BookmarkResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    created_at: datetime
    job: Optional[JobResponse] = None

    class Config:
        from_attributes = True


class BookmarkToggleResponse(BaseModel):
    job_id: UUID4
    bookmarked: bool
