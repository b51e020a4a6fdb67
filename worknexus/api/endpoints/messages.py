"""
Messaging endpoints: conversations (inbox) and the messages inside them.
"""

from typing import Dict, List
from uuid import UUID
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.core.rate_limiter import check_message_rate_limit
from worknexus.crud import message as message_crud
from worknexus.models.user import User
from worknexus.schemas.message import (
    ConversationCreateRequest,
    ConversationResponse,
    ConversationSummary,
    MessageCreateRequest,
    MessageResponse,
)
from worknexus.services import messaging as messaging_service

router = APIRouter(tags=["Messages"])


@router.post("/conversations", status_code=201, response_model=ConversationResponse)
def start_conversation(
    request: ConversationCreateRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Open a conversation with another user, optionally about a job.

    Returns the existing thread (200) when the same pair already has one
    for that job.
    """
    conversation, created = messaging_service.start_conversation(
        db, current_user, request.receiver_id, request.job_id
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return conversation


@router.get("/conversations", response_model=List[ConversationSummary])
def list_conversations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return messaging_service.inbox(db, current_user)


@router.get("/conversations/{conversation_id}/messages", response_model=List[MessageResponse])
def get_messages(
    conversation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Thread history, oldest first. Incoming messages are marked as read."""
    return messaging_service.open_thread(db, conversation_id, current_user)


@router.post("/conversations/{conversation_id}/messages", status_code=201, response_model=MessageResponse)
def send_message(
    conversation_id: UUID,
    request: MessageCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    check_message_rate_limit(str(current_user.id))
    return messaging_service.send_message(db, conversation_id, current_user, request.content)


@router.get("/messages/unread-count")
def get_unread_message_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Dict[str, int]:
    return {"unread": message_crud.unread_count(db, current_user.id)}
