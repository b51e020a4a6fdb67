"""
Direct messaging between users.

A conversation is a thread between two users, optionally scoped to a job.
Messages themselves are stored per (sender, receiver) pair; opening a thread
loads every message exchanged by the two participants.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from worknexus.core.realtime import INSERT
from worknexus.crud import job as job_crud
from worknexus.crud import message as message_crud
from worknexus.crud import profile as profile_crud
from worknexus.crud import user as user_crud
from worknexus.models.message import Conversation, Message
from worknexus.models.user import User
from worknexus.schemas.message import ConversationResponse, ConversationSummary, MessageResponse
from worknexus.schemas.profile import PublicProfile
from worknexus.services.events import publish_row

logger = logging.getLogger(__name__)


def start_conversation(db: Session, initiator: User, receiver_id: UUID, job_id: Optional[UUID] = None):
    """
    Return the existing thread for this pair and job, or open a new one.

    Returns:
        Tuple of (Conversation, created flag)

    Raises:
        HTTPException 400: Messaging yourself
        HTTPException 404: Receiver or job does not exist
    """
    if receiver_id == initiator.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot message yourself")
    if not user_crud.get_by_id(db, receiver_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if job_id is not None and not job_crud.get_by_id(db, job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")

    existing = message_crud.find_conversation(db, initiator.id, receiver_id, job_id)
    if existing:
        return existing, False

    conversation = message_crud.create_conversation(db, initiator.id, receiver_id, job_id)
    logger.info(f"Conversation {conversation.id} opened between {initiator.id} and {receiver_id}")
    return conversation, True


def get_conversation_for(db: Session, conversation_id: UUID, user: User) -> Conversation:
    conversation = message_crud.get_conversation(db, conversation_id)
    if not conversation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    if not conversation.has_participant(user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a participant in this conversation")
    return conversation


def inbox(db: Session, user: User) -> List[ConversationSummary]:
    """
    The user's conversations, most recent first, ready to render.

    Profiles, job titles, unread counts and last messages are each fetched
    with one query for the whole inbox.
    """
    conversations = message_crud.get_conversations_for_user(db, user.id)
    partner_ids = list({c.other_participant(user.id) for c in conversations})

    profiles = profile_crud.get_many(db, partner_ids)
    jobs = job_crud.get_many(db, (c.job_id for c in conversations if c.job_id))
    unread = message_crud.unread_by_sender(db, user.id)
    latest = message_crud.last_messages(db, user.id, partner_ids)

    result = []
    for conversation in conversations:
        partner_id = conversation.other_participant(user.id)
        profile = profiles.get(partner_id)
        job = jobs.get(conversation.job_id) if conversation.job_id else None
        last = latest.get(partner_id)
        result.append(ConversationSummary(
            **ConversationResponse.model_validate(conversation).model_dump(),
            other_user=PublicProfile.model_validate(profile) if profile else None,
            job_title=job.title if job else None,
            unread_count=unread.get(partner_id, 0),
            last_message=last.content if last else None,
        ))
    return result


def open_thread(db: Session, conversation_id: UUID, user: User) -> List[Message]:
    """Messages of a thread, oldest first. Marks incoming messages as read."""
    conversation = get_conversation_for(db, conversation_id, user)
    partner_id = conversation.other_participant(user.id)

    updated = message_crud.mark_read_from(db, receiver_id=user.id, sender_id=partner_id)
    if updated:
        logger.debug(f"Marked {updated} message(s) read for user {user.id}")

    return message_crud.get_messages_between(db, user.id, partner_id)


def send_message(db: Session, conversation_id: UUID, sender: User, content: str) -> Message:
    """
    Post a message into a thread.

    Raises:
        HTTPException 400: Blank content
        HTTPException 403: Sender is not a participant
        HTTPException 404: Conversation not found
    """
    text = content.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message cannot be empty")

    conversation = get_conversation_for(db, conversation_id, sender)
    message, conversation = message_crud.create_message(db, conversation, sender.id, text)
    logger.info(f"Message {message.id} sent in conversation {conversation.id}")

    publish_row("messages", INSERT, MessageResponse, message, [message.sender_id, message.receiver_id])
    return message
