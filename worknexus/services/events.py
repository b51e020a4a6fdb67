"""
Helpers for publishing committed row changes to the realtime change feed.

Call these only after db.commit() has succeeded so subscribers never see a
change that was rolled back.
"""

import logging
from typing import Iterable, Type
from uuid import UUID
from pydantic import BaseModel

from worknexus.core.realtime import change_feed

logger = logging.getLogger(__name__)


def publish_row(table: str, event_type: str, schema: Type[BaseModel], row, audience: Iterable[UUID]) -> int:
    """
    Serialize an ORM row through its response schema and publish it.

    Returns:
        Number of subscribers the event was delivered to
    """
    record = schema.model_validate(row).model_dump(mode="json")
    delivered = change_feed.emit(table, event_type, record, audience)
    logger.debug(f"Published {event_type} on {table} to {delivered} subscriber(s)")
    return delivered
