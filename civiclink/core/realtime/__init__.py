# Third-party imports
import redis.asyncio as redis

# Local application imports
from civiclink.core.realtime.bus import FanoutBus, Subscription
from civiclink.core.realtime.events import ChangeEvent, ChangeType, Predicate, Topic, field_equals, to_record
from civiclink.core.realtime.memory_bus import InMemoryFanoutBus
from civiclink.core.realtime.redis_bus import RedisFanoutBus
from civiclink.settings import settings


def build_fanout_bus(dedicated_client: bool = False) -> FanoutBus:
    """
    Bus for the configured backend.

    ``dedicated_client`` gives the bus its own Redis connection, closed with
    the bus; Celery tasks need this because each run gets a fresh event loop.
    """
    if settings.FANOUT_BACKEND == "memory":
        return InMemoryFanoutBus()

    if dedicated_client:
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return RedisFanoutBus(client, settings.FANOUT_CHANNEL_PREFIX, owns_client=True)

    # Local application imports
    from civiclink.core.caching.redis import redis_client

    return RedisFanoutBus(redis_client, settings.FANOUT_CHANNEL_PREFIX)


__all__ = [
    "ChangeEvent",
    "ChangeType",
    "FanoutBus",
    "InMemoryFanoutBus",
    "Predicate",
    "RedisFanoutBus",
    "Subscription",
    "Topic",
    "build_fanout_bus",
    "field_equals",
    "to_record",
]
