# Standard library imports
import asyncio
from collections import defaultdict

# Local application imports
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime.bus import FanoutBus, Subscription
from civiclink.core.realtime.events import ChangeEvent, Predicate, Topic

logger = get_contextual_logger(__name__)


class InMemorySubscription(Subscription):
    def __init__(self, bus: "InMemoryFanoutBus", topic: Topic, predicate: Predicate | None) -> None:
        super().__init__(topic, predicate)
        self._bus = bus
        self.queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue()

    async def _receive(self) -> ChangeEvent | None:
        return await self.queue.get()

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._bus._detach(self)
        self.queue.put_nowait(None)


class InMemoryFanoutBus(FanoutBus):
    """Single-process bus: each subscriber owns an unbounded queue."""

    def __init__(self) -> None:
        self._subscribers: dict[Topic, set[InMemorySubscription]] = defaultdict(set)

    async def publish(self, topic: Topic, payload: ChangeEvent) -> None:
        subscribers = list(self._subscribers.get(topic, ()))
        for subscription in subscribers:
            subscription.queue.put_nowait(payload)
        logger.debug(f"Published {payload.event_type.value} on {topic.value} to {len(subscribers)} subscriber(s)")

    async def subscribe(self, topic: Topic, predicate: Predicate | None = None) -> Subscription:
        subscription = InMemorySubscription(self, topic, predicate)
        self._subscribers[topic].add(subscription)
        return subscription

    def subscriber_count(self, topic: Topic) -> int:
        return len(self._subscribers.get(topic, ()))

    def _detach(self, subscription: InMemorySubscription) -> None:
        self._subscribers[subscription.topic].discard(subscription)

    async def close(self) -> None:
        for subscriptions in list(self._subscribers.values()):
            for subscription in list(subscriptions):
                await subscription.close()
