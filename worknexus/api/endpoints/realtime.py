"""
Realtime endpoints.

GET /realtime/stream holds a Server-Sent Events connection open and pushes
every committed change to messages, notifications and job_applications
that concerns the caller. GET /realtime/counts backs the sidebar badges.
"""

import asyncio
import json
import logging
from typing import Optional, Set
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from sse_starlette.sse import EventSourceResponse

from worknexus.core.config import settings
from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.core.realtime import change_feed
from worknexus.crud import message as message_crud
from worknexus.crud import notification as notification_crud
from worknexus.models.user import User
from worknexus.schemas.profile import UnreadCounts

router = APIRouter(prefix="/realtime", tags=["Realtime"])
logger = logging.getLogger(__name__)

STREAMABLE_TABLES = {"messages", "notifications", "job_applications"}


def parse_tables(tables: Optional[str]):
    """Comma-separated table names -> set, or None for every table."""
    if not tables:
        return None
    requested = {t.strip() for t in tables.split(",") if t.strip()}
    unknown = requested - STREAMABLE_TABLES
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown tables: {', '.join(sorted(unknown))}")
    return requested or None


async def stream_events(request: Request, user_id: UUID, table_filter: Optional[Set[str]] = None):
    """
    Yield SSE event dicts for one connected client until it disconnects.

    The subscription lives exactly as long as the generator runs.
    """
    subscription = change_feed.subscribe(user_id, table_filter)
    logger.info(f"Realtime stream opened for user {user_id}")
    try:
        while True:
            if await request.is_disconnected():
                break
            try:
                event = await asyncio.wait_for(
                    subscription.queue.get(), timeout=settings.REALTIME_KEEPALIVE_SECONDS
                )
            except asyncio.TimeoutError:
                yield {"event": "ping", "data": "{}"}
                continue
            yield {"event": event.table, "data": json.dumps(event.to_payload())}
    finally:
        change_feed.unsubscribe(subscription)
        logger.info(f"Realtime stream closed for user {user_id}")


@router.get("/stream")
async def stream_changes(
    request: Request,
    tables: Optional[str] = Query(None, description="Comma-separated: messages,notifications,job_applications"),
    current_user: User = Depends(get_current_user),
):
    """
    Stream change events for the current user over SSE.

    Each event is named after its table and carries
    {table, eventType, new, commit_timestamp}. A "ping" event is sent when
    nothing happened for REALTIME_KEEPALIVE_SECONDS.
    """
    table_filter = parse_tables(tables)
    return EventSourceResponse(stream_events(request, current_user.id, table_filter))


@router.get("/counts", response_model=UnreadCounts)
def get_unread_counts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return UnreadCounts(
        unread_notifications=notification_crud.unread_count(db, current_user.id),
        unread_messages=message_crud.unread_count(db, current_user.id),
    )
