"""
In-process change feed.

Services publish row-change events after committing; WebSocket endpoints
subscribe to a channel and forward what they receive. Publishing is safe
from the sync route handlers running in the threadpool: each event is
handed to the subscriber's own event loop.
"""

import asyncio
import logging
import threading
from datetime import datetime
from typing import Any, Dict, Optional, Set

from fastapi.encoders import jsonable_encoder

from app.core.config import settings

logger = logging.getLogger(__name__)


def channel_for(table: str, key: str) -> str:
    return f"{table}:{key}"


class Subscription:
    def __init__(self, channel: str, loop: asyncio.AbstractEventLoop, maxsize: int):
        self.channel = channel
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def _deliver(self, event: Dict[str, Any]) -> None:
        # slow consumer: drop the oldest event, the newest position matters most
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
        self.queue.put_nowait(event)

    async def get(self) -> Dict[str, Any]:
        return await self.queue.get()


class ChangeFeed:
    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._subscribers: Dict[str, Set[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, channel: str, loop: Optional[asyncio.AbstractEventLoop] = None) -> Subscription:
        """Register a subscriber. Must be called from the consuming event loop."""
        sub = Subscription(channel, loop or asyncio.get_running_loop(), self._queue_size)
        with self._lock:
            self._subscribers.setdefault(channel, set()).add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscribers.get(sub.channel)
            if subs is None:
                return
            subs.discard(sub)
            if not subs:
                del self._subscribers[sub.channel]

    def publish(self, channel: str, table: str, row: Dict[str, Any], event: str = "INSERT") -> int:
        """Fan an event out to every subscriber of the channel. Returns the delivery count."""
        message = {
            "event": event,
            "table": table,
            "channel": channel,
            "new": jsonable_encoder(row),
            "published_at": datetime.utcnow().isoformat(),
        }

        with self._lock:
            subs = list(self._subscribers.get(channel, ()))

        delivered = 0
        for sub in subs:
            try:
                sub.loop.call_soon_threadsafe(sub._deliver, message)
                delivered += 1
            except RuntimeError:
                # loop already closed, the connection is gone
                logger.debug("[REALTIME] Dropping closed subscriber on %s", channel)
                self.unsubscribe(sub)

        return delivered

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._subscribers.get(channel, ()))


# Singleton instance
feed = ChangeFeed(queue_size=settings.REALTIME_QUEUE_SIZE)
