"""
Publish/subscribe contract for realtime change delivery.

Subscribers pass a predicate that is evaluated on the server side before an
event is handed out, so a subscription built with a recipient predicate
never yields another user's rows.
"""

# Standard library imports
from abc import ABC, abstractmethod
from typing import Any

# Local application imports
from civiclink.core.realtime.events import ChangeEvent, ChangeType, Predicate, Topic


class Subscription(ABC):
    def __init__(self, topic: Topic, predicate: Predicate | None = None) -> None:
        self.topic = topic
        self.predicate = predicate
        self.closed = False

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        while not self.closed:
            event = await self._receive()
            if event is None:
                break
            if self.predicate is None or self.predicate(event):
                return event
        raise StopAsyncIteration

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @abstractmethod
    async def _receive(self) -> ChangeEvent | None:
        """Next raw event on the topic, or None once the subscription is closed."""

    @abstractmethod
    async def close(self) -> None: ...


class FanoutBus(ABC):
    @abstractmethod
    async def publish(self, topic: Topic, payload: ChangeEvent) -> None:
        """
        Deliver ``payload`` to every live subscriber of ``topic``.

        Raises:
            UpstreamUnavailable: the transport could not be reached.
        """

    @abstractmethod
    async def subscribe(self, topic: Topic, predicate: Predicate | None = None) -> Subscription:
        """
        Register a subscriber immediately and return its event stream.

        Raises:
            UpstreamUnavailable: the transport could not be reached.
        """

    async def close(self) -> None:
        return None

    async def publish_change(
        self,
        topic: Topic,
        event_type: ChangeType,
        record: dict[str, Any],
        old_record: dict[str, Any] | None = None,
    ) -> ChangeEvent:
        event = ChangeEvent(topic=topic, event_type=event_type, record=record, old_record=old_record)
        await self.publish(topic, event)
        return event
