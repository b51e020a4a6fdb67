"""
CRUD operations for conversations and messages.

The inbox needs per-conversation unread counts and last-message previews;
those are computed here with one grouped query each instead of one query
per conversation.
"""

from typing import Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from worknexus.models.message import Conversation, Message


def _pair_filter(user_a: UUID, user_b: UUID):
    return or_(
        and_(Message.sender_id == user_a, Message.receiver_id == user_b),
        and_(Message.sender_id == user_b, Message.receiver_id == user_a),
    )


def get_conversation(db: Session, conversation_id: UUID) -> Optional[Conversation]:
    return db.query(Conversation).filter(Conversation.id == conversation_id).first()


def find_conversation(db: Session, user_a: UUID, user_b: UUID, job_id: Optional[UUID]) -> Optional[Conversation]:
    """Look up a thread for an unordered participant pair and job (None matches NULL)."""
    query = db.query(Conversation).filter(
        or_(
            and_(Conversation.participant_one == user_a, Conversation.participant_two == user_b),
            and_(Conversation.participant_one == user_b, Conversation.participant_two == user_a),
        )
    )
    if job_id is None:
        query = query.filter(Conversation.job_id.is_(None))
    else:
        query = query.filter(Conversation.job_id == job_id)
    return query.first()


def create_conversation(db: Session, initiator_id: UUID, receiver_id: UUID, job_id: Optional[UUID]) -> Conversation:
    conversation = Conversation(participant_one=initiator_id, participant_two=receiver_id, job_id=job_id)
    db.add(conversation)
    db.commit()
    db.refresh(conversation)
    return conversation


def get_conversations_for_user(db: Session, user_id: UUID) -> List[Conversation]:
    """A user's threads, most recently active first."""
    return (
        db.query(Conversation)
        .filter(or_(Conversation.participant_one == user_id, Conversation.participant_two == user_id))
        .order_by(Conversation.last_message_at.desc())
        .all()
    )


def get_messages_between(db: Session, user_a: UUID, user_b: UUID) -> List[Message]:
    """Messages exchanged by two users, oldest first."""
    return (
        db.query(Message)
        .filter(_pair_filter(user_a, user_b))
        .order_by(Message.created_at.asc())
        .all()
    )


def mark_read_from(db: Session, receiver_id: UUID, sender_id: UUID) -> int:
    """
    Mark every unread message from sender to receiver as read.

    Returns:
        Number of rows updated
    """
    updated = (
        db.query(Message)
        .filter(
            Message.receiver_id == receiver_id,
            Message.sender_id == sender_id,
            Message.is_read.is_(False),
        )
        .update({"is_read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def unread_count(db: Session, receiver_id: UUID) -> int:
    return (
        db.query(Message)
        .filter(Message.receiver_id == receiver_id, Message.is_read.is_(False))
        .count()
    )


def unread_by_sender(db: Session, receiver_id: UUID) -> Dict[UUID, int]:
    """Unread message counts for a receiver, grouped by sender."""
    rows = (
        db.query(Message.sender_id, func.count(Message.id))
        .filter(Message.receiver_id == receiver_id, Message.is_read.is_(False))
        .group_by(Message.sender_id)
        .all()
    )
    return {sender_id: total for sender_id, total in rows}


def last_messages(db: Session, user_id: UUID, partner_ids: List[UUID]) -> Dict[UUID, Message]:
    """
    Latest message exchanged between user_id and each partner.

    Walks the user's messages with those partners newest-first and keeps
    the first one seen per partner.
    """
    if not partner_ids:
        return {}
    rows = (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id.in_(partner_ids)),
                and_(Message.receiver_id == user_id, Message.sender_id.in_(partner_ids)),
            )
        )
        .order_by(Message.created_at.desc())
        .all()
    )
    latest: Dict[UUID, Message] = {}
    for message in rows:
        partner = message.receiver_id if message.sender_id == user_id else message.sender_id
        latest.setdefault(partner, message)
    return latest


def create_message(
    db: Session,
    conversation: Conversation,
    sender_id: UUID,
    content: str,
) -> Tuple[Message, Conversation]:
    """Insert a message and bump the conversation's activity timestamp."""
    message = Message(
        sender_id=sender_id,
        receiver_id=conversation.other_participant(sender_id),
        job_id=conversation.job_id,
        content=content,
    )
    db.add(message)
    db.flush()
    conversation.last_message_at = message.created_at
    db.commit()
    db.refresh(message)
    db.refresh(conversation)
    return message, conversation
