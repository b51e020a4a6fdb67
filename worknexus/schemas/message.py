from pydantic import BaseModel, Field, UUID4
from typing import Optional
from datetime import datetime

from worknexus.schemas.profile import PublicProfile


class ConversationCreateRequest(BaseModel):
    receiver_id: UUID4
    job_id: Optional[UUID4] = None


class ConversationResponse(BaseModel):
    id: UUID4
    participant_one: UUID4
    participant_two: UUID4
    job_id: Optional[UUID4] = None
    created_at: datetime
    last_message_at: datetime

    class Config:
        from_attributes = True


class ConversationSummary(ConversationResponse):
    """Inbox row: the thread plus everything needed to render it."""
    other_user: Optional[PublicProfile] = None
    job_title: Optional[str] = None
    unread_count: int = 0
    last_message: Optional[str] = None


class MessageCreateRequest(BaseModel):
    content: str = Field(..., max_length=4000)


class MessageResponse(BaseModel):
    id: UUID4
    sender_id: UUID4
    receiver_id: UUID4
    job_id: Optional[UUID4] = None
    content: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationResponse(BaseModel):
    id: UUID4
    user_id: UUID4
    title: str
    message: str
    type: Optional[str] = None
    related_id: Optional[UUID4] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MarkReadResponse(BaseModel):
    updated: int
