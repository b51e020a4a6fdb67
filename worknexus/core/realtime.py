"""
In-process change feed.

Write paths publish a ChangeEvent after committing a row change; each
connected client holds a Subscription whose queue receives the events
addressed to it. The SSE endpoint in api/endpoints/realtime.py drains those
queues.

Sync endpoints run in FastAPI's threadpool, so publish() hands events to a
subscriber's event loop with call_soon_threadsafe rather than touching the
asyncio.Queue directly.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set
from uuid import UUID

from worknexus.core.config import settings
from worknexus.core.timeutils import utcnow

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass
class ChangeEvent:
    """A committed row change and the users allowed to see it."""
    table: str
    event_type: str
    record: Dict[str, Any]
    audience: FrozenSet[UUID]
    committed_at: str = field(default_factory=lambda: utcnow().isoformat())

    def to_payload(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "eventType": self.event_type,
            "new": self.record,
            "commit_timestamp": self.committed_at,
        }


class Subscription:
    def __init__(
        self,
        user_id: UUID,
        tables: Optional[Iterable[str]] = None,
        maxsize: int = 100,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.user_id = user_id
        self.tables: Optional[FrozenSet[str]] = frozenset(tables) if tables else None
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.loop = loop
        self.dropped = 0

    def matches(self, event: ChangeEvent) -> bool:
        if self.user_id not in event.audience:
            return False
        return self.tables is None or event.table in self.tables

    def deliver(self, event: ChangeEvent) -> None:
        if self.loop is None or self.loop.is_closed():
            self._put(event)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self.loop:
            self._put(event)
        else:
            self.loop.call_soon_threadsafe(self._put, event)

    def _put(self, event: ChangeEvent) -> None:
        # Slow consumer: drop the oldest event rather than block writers
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
            logger.warning(f"Realtime queue full for user {self.user_id}, dropped oldest event")
        self.queue.put_nowait(event)


class ChangeFeed:
    """Fan-out broker for ChangeEvents."""

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscriptions: Set[Subscription] = set()
        self._lock = threading.Lock()

    def subscribe(self, user_id: UUID, tables: Optional[Iterable[str]] = None) -> Subscription:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        subscription = Subscription(user_id, tables, maxsize=self.queue_size, loop=loop)
        with self._lock:
            self._subscriptions.add(subscription)
        logger.debug(f"Realtime subscription opened for user {user_id}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.discard(subscription)
        logger.debug(f"Realtime subscription closed for user {subscription.user_id}")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: ChangeEvent) -> int:
        """Deliver an event to every matching subscriber. Returns the delivery count."""
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(event)]
        for subscription in targets:
            subscription.deliver(event)
        return len(targets)

    def emit(self, table: str, event_type: str, record: Dict[str, Any], audience: Iterable[UUID]) -> int:
        return self.publish(ChangeEvent(table, event_type, record, frozenset(audience)))


change_feed = ChangeFeed(queue_size=settings.REALTIME_QUEUE_SIZE)
