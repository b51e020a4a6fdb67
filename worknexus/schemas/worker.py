from pydantic import BaseModel, Field, UUID4, model_validator
from typing import List, Optional
from datetime import datetime

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AvailabilitySlot(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday")
    is_available: bool = True
    start_time: str = Field("09:00", pattern=TIME_PATTERN)
    end_time: str = Field("18:00", pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_window(self):
        # HH:MM strings compare correctly as text
        if self.is_available and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    class Config:
        from_attributes = True


class AvailabilityUpdateRequest(BaseModel):
    slots: List[AvailabilitySlot]

    @model_validator(mode="after")
    def unique_days(self):
        days = [slot.day_of_week for slot in self.slots]
        if len(days) != len(set(days)):
            raise ValueError("Each day_of_week may appear only once")
        return self


class SkillResponse(BaseModel):
    id: UUID4
    name: str
    category: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


class UserSkillEntry(BaseModel):
    skill_id: UUID4
    proficiency_level: Optional[int] = Field(None, ge=1, le=5)
    years_of_experience: Optional[int] = Field(None, ge=0, le=60)


class UserSkillsUpdateRequest(BaseModel):
    skills: List[UserSkillEntry]


class UserSkillResponse(BaseModel):
    skill_id: UUID4
    proficiency_level: Optional[int] = None
    years_of_experience: Optional[int] = None
    skill: SkillResponse

    class Config:
        from_attributes = True


class ActivityResponse(BaseModel):
    id: UUID4
    activity_type: str
    description: str
    related_id: Optional[UUID4] = None
    created_at: datetime

    class Config:
        from_attributes = True
