"""
In-process publish/subscribe for GraphQL subscriptions.

Publishing is fire-and-forget: each live subscriber has its own bounded
queue, a full queue drops the message, and nothing is replayed to late or
disconnected subscribers. Only subscribers in this process are reached.
"""

import asyncio
from collections import defaultdict
from typing import Any

from app.core.logging import get_logger

logger = get_logger(__name__)

EVENT_ADDED = "EVENT_ADDED"
BOOKING_ADDED = "BOOKING_ADDED"

DEFAULT_QUEUE_SIZE = 100


class Subscription:
    """Async iterator over one topic. Registered on creation, removed on close."""

    def __init__(self, broker: "PubSub", topic: str, max_queue_size: int):
        self._broker = broker
        self.topic = topic
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self.closed = False
        broker._register(self)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Any:
        if self.closed:
            raise StopAsyncIteration
        return await self.queue.get()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._broker._unregister(self)


class PubSub:
    def __init__(self, max_queue_size: int = DEFAULT_QUEUE_SIZE):
        self.max_queue_size = max_queue_size
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)

    def subscribe(self, topic: str) -> Subscription:
        return Subscription(self, topic, self.max_queue_size)

    def publish(self, topic: str, payload: Any) -> int:
        """Hand the payload to every current subscriber; returns how many got it."""
        delivered = 0
        for subscription in list(self._subscribers.get(topic, ())):
            try:
                subscription.queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("subscriber_queue_full", topic=topic)
        logger.debug("published", topic=topic, subscribers=delivered)
        return delivered

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def _register(self, subscription: Subscription) -> None:
        self._subscribers[subscription.topic].add(subscription)

    def _unregister(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.topic)
        if subscribers is not None:
            subscribers.discard(subscription)
            if not subscribers:
                del self._subscribers[subscription.topic]


pubsub = PubSub()
