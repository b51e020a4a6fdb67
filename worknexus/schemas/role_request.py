from pydantic import BaseModel, Field, UUID4
from typing import Optional
from datetime import datetime

from worknexus.models.role_request import RoleRequestStatus
from worknexus.schemas.profile import PublicProfile


class RoleRequestCreateRequest(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=200)
    business_type: str = Field(..., min_length=1, max_length=100)
    reason: str = Field(..., min_length=1, max_length=2000)


class RoleRequestResponse(BaseModel):
    id: UUID4
    user_id: UUID4
    business_name: str
    business_type: str
    reason: str
    status: RoleRequestStatus
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID4] = None

    class Config:
        from_attributes = True


class RoleRequestWithUser(RoleRequestResponse):
    user: Optional[PublicProfile] = None
