"""In-memory topic publisher for change notifications.

Delivery is best effort: only subscribers registered at publish time see an
event, nothing is replayed, and a subscriber whose queue is full misses the
event.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import suppress
from types import TracebackType

from ..config import settings
from ..logging import get_logger
from .models import ChangeEvent

logger = get_logger(__name__)


class Subscription:
    """Live stream of events on one topic.

    Registered with the publisher as soon as it is created; ``close()``
    unregisters it and ends iteration.
    """

    def __init__(self, publisher: ChangePublisher, topic: str, queue_size: int) -> None:
        self.topic = topic
        self._publisher = publisher
        # None is queued on close to wake a blocked consumer
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=queue_size)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, event: ChangeEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                "Subscriber queue full, dropping event", topic=self.topic, entity_id=event.entity_id
            )
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._publisher._unregister(self)
        # A full queue has no consumer blocked on it
        with suppress(asyncio.QueueFull):
            self._queue.put_nowait(None)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> ChangeEvent:
        if self._closed:
            raise StopAsyncIteration
        event = await self._queue.get()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class ChangePublisher:
    def __init__(self, queue_size: int | None = None) -> None:
        self._queue_size = queue_size or settings.subscription_queue_size
        self._subscribers: defaultdict[str, set[Subscription]] = defaultdict(set)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    def subscribe(self, topic: str) -> Subscription:
        """Register a new subscriber on ``topic``."""
        subscription = Subscription(self, topic, self._queue_size)
        self._subscribers[topic].add(subscription)
        logger.debug("Subscriber registered", topic=topic, subscribers=self.subscriber_count(topic))
        return subscription

    def _unregister(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.topic)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscribers[subscription.topic]
        logger.debug(
            "Subscriber removed",
            topic=subscription.topic,
            subscribers=self.subscriber_count(subscription.topic),
        )

    async def publish(self, topic: str, entity_id: int) -> ChangeEvent:
        """Deliver an event to every current subscriber of ``topic``."""
        event = ChangeEvent(topic=topic, entity_id=entity_id)
        subscribers = list(self._subscribers.get(topic, ()))
        delivered = sum(1 for subscription in subscribers if subscription.offer(event))
        logger.info(
            "Change published",
            topic=topic,
            entity_id=entity_id,
            subscribers=len(subscribers),
            delivered=delivered,
        )
        return event


_publisher: ChangePublisher | None = None


def get_publisher() -> ChangePublisher:
    """Return the process-wide publisher, creating it on first use."""
    global _publisher
    if _publisher is None:
        _publisher = ChangePublisher()
    return _publisher
