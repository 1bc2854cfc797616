"""
In-process realtime change feed.

Every committed mutation is published here; WebSocket clients subscribe to
the tables they show and re-fetch when an event arrives. Delivery is
fire-and-forget with no ordering guarantees across tables.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional, Set

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    table: str
    event: ChangeType
    id: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Subscription:
    """
    One subscriber's bounded event queue.

    When the queue is full the oldest event is dropped; clients re-fetch
    whole tables, so only the fact that something changed matters.
    """

    def __init__(self, feed: "ChangeFeed", tables: Optional[Iterable[str]], maxsize: int):
        self._feed = feed
        self.tables = frozenset(tables) if tables else None
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False
        self.dropped = 0

    def matches(self, event: ChangeEvent) -> bool:
        return self.tables is None or event.table in self.tables

    def _offer(self, item) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
        self._queue.put_nowait(item)

    async def get(self) -> Optional[ChangeEvent]:
        """Next event, or ``None`` once the subscription is closed."""
        if self.closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed._remove(self)
        # wake up a pending get()
        self._offer(None)

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event


class ChangeFeed:
    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscriptions: Set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, tables: Optional[Iterable[str]] = None) -> Subscription:
        """Subscribe to events for ``tables`` (all tables when omitted)."""
        subscription = Subscription(self, tables, self.queue_size)
        self._subscriptions.add(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions.discard(subscription)

    def publish(self, event: ChangeEvent) -> int:
        """Fan ``event`` out to matching subscribers. Returns how many got it."""
        delivered = 0
        for subscription in list(self._subscriptions):
            if subscription.matches(event):
                subscription._offer(event)
                delivered += 1
        logger.debug("Published %s on %s to %d subscribers", event.event.value, event.table, delivered)
        return delivered

    def notify(self, table: str, event: ChangeType, row_id: Optional[int] = None) -> int:
        return self.publish(ChangeEvent(table=table, event=event, id=row_id))


change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    return change_feed
