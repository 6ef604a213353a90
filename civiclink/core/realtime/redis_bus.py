# Standard library imports
from collections.abc import AsyncIterator
from typing import Any

# Third-party imports
from pydantic import ValidationError
import redis.asyncio as redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

# Local application imports
from civiclink.core.exceptions import UpstreamUnavailable
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime.bus import FanoutBus, Subscription
from civiclink.core.realtime.events import ChangeEvent, Predicate, Topic

logger = get_contextual_logger(__name__)


class RedisSubscription(Subscription):
    def __init__(self, topic: Topic, predicate: Predicate | None, pubsub: PubSub) -> None:
        super().__init__(topic, predicate)
        self._pubsub = pubsub
        self._messages: AsyncIterator[dict[str, Any]] = pubsub.listen()

    async def _receive(self) -> ChangeEvent | None:
        while not self.closed:
            try:
                message = await anext(self._messages)
            except StopAsyncIteration:
                return None
            except RedisError as e:
                raise UpstreamUnavailable("Realtime channel lost, please reconnect") from e

            if message.get("type") != "message":
                continue
            try:
                return ChangeEvent.model_validate_json(message["data"])
            except ValidationError:
                logger.warning(f"Discarding malformed event on {self.topic.value}")
        return None

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self._pubsub.unsubscribe()
            await self._pubsub.aclose()
        except RedisError as e:
            logger.warning(f"Failed to close subscription on {self.topic.value}: {e}")


class RedisFanoutBus(FanoutBus):
    """Redis pub/sub transport; one channel per topic under a common prefix."""

    def __init__(self, client: redis.Redis, channel_prefix: str, owns_client: bool = False) -> None:
        self.client = client
        self.channel_prefix = channel_prefix
        # Worker processes open a client per task and close it with the bus
        self.owns_client = owns_client

    def channel(self, topic: Topic) -> str:
        return f"{self.channel_prefix}:{topic.value}"

    async def publish(self, topic: Topic, payload: ChangeEvent) -> None:
        try:
            await self.client.publish(self.channel(topic), payload.model_dump_json())
        except RedisError as e:
            logger.error(f"Failed to publish {payload.event_type.value} on {topic.value}: {e}")
            raise UpstreamUnavailable("Realtime channel unavailable, please retry") from e

    async def subscribe(self, topic: Topic, predicate: Predicate | None = None) -> Subscription:
        pubsub = self.client.pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(self.channel(topic))
        except RedisError as e:
            raise UpstreamUnavailable("Realtime channel unavailable, please retry") from e
        return RedisSubscription(topic, predicate, pubsub)

    async def close(self) -> None:
        if self.owns_client:
            await self.client.aclose()
