"""In-process change feed pushed to websocket subscribers.

Writers publish a small notification per inserted, updated or deleted row;
subscribers refetch whatever they display. Each subscriber owns a bounded
queue and a slow consumer loses its oldest notifications, never the newest.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hindu_unity.core.settings import settings
from hindu_unity.db.time import utcnow

logger = logging.getLogger(__name__)

CHANNEL_TABLES = frozenset(
    {"posts", "comments", "post_reactions", "poll_votes", "events", "protests", "live_streams"}
)


@dataclass(frozen=True)
class ChangeNotification:
    table: str
    event: str
    record_id: int | str
    occurred_at: datetime = field(default_factory=utcnow)

    def as_message(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "event": self.event,
            "id": self.record_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(eq=False)
class Subscription:
    tables: frozenset[str]
    queue: asyncio.Queue[ChangeNotification]

    def offer(self, notification: ChangeNotification) -> None:
        if notification.table not in self.tables:
            return
        if self.queue.full():
            try:
                self.queue.get_nowait()
            except asyncio.QueueEmpty:  # pragma: no cover - raced with consumer
                pass
        self.queue.put_nowait(notification)


class ChangeFeed:
    """Fan out change notifications to the current subscribers."""

    def __init__(self, queue_size: int | None = None) -> None:
        self.queue_size = queue_size or settings.realtime_queue_size
        self._subscriptions: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, table: str, event: str, record_id: int | str) -> ChangeNotification:
        """Deliver a notification to every subscriber watching `table`."""
        notification = ChangeNotification(table=table, event=event, record_id=record_id)
        for subscription in list(self._subscriptions):
            subscription.offer(notification)
        logger.debug("Published %s %s %s", table, event, record_id)
        return notification

    @asynccontextmanager
    async def subscribe(self, tables: Iterable[str]) -> AsyncIterator[Subscription]:
        """Register a subscriber for the duration of the context."""
        subscription = Subscription(
            tables=frozenset(tables) & CHANNEL_TABLES,
            queue=asyncio.Queue(maxsize=self.queue_size),
        )
        self._subscriptions.add(subscription)
        try:
            yield subscription
        finally:
            self._subscriptions.discard(subscription)


_change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return _change_feed
