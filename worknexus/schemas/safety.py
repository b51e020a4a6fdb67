"""
Schemas for on-site check-in, SOS and emergency contacts.
"""

from pydantic import BaseModel, Field, UUID4
from typing import Optional
from datetime import datetime

from worknexus.models.checkin import CheckinType


class Coordinates(BaseModel):
    """Device geolocation as reported by the client."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class CheckinRequest(Coordinates):
    qr_code: str = Field(..., max_length=256)


class QRCheckinResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    worker_id: UUID4
    qr_code: str
    checked_in_at: datetime
    checked_out_at: Optional[datetime] = None
    is_late: bool
    minutes_late: int

    class Config:
        from_attributes = True


class SafetyCheckinResponse(BaseModel):
    id: UUID4
    user_id: UUID4
    job_id: Optional[UUID4] = None
    latitude: float
    longitude: float
    checkin_type: CheckinType
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class EmergencyContactCreateRequest(BaseModel):
    name: str = Field(..., max_length=120)
    phone: str = Field(..., max_length=20)
    relationship: str = Field(..., max_length=60)


class EmergencyContactResponse(BaseModel):
    id: UUID4
    user_id: UUID4
    name: str
    phone: str
    relationship: str
    is_primary: bool
    created_at: datetime

    class Config:
        from_attributes = True


class SOSResponse(BaseModel):
    checkin: SafetyCheckinResponse
    primary_contact: Optional[EmergencyContactResponse] = None
    message: str
