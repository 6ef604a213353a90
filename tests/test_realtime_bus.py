import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from civiclink.core.exceptions import UpstreamUnavailable
from civiclink.api.internal.routes.v1.realtime.ws_routes import pump
from civiclink.core.realtime import ChangeEvent, ChangeType, InMemoryFanoutBus, RedisFanoutBus, Topic, field_equals


class UnreachableRedis:
    """Client whose every call fails the way a dropped connection does."""

    async def publish(self, channel, message):
        raise RedisConnectionError("Connection refused")

    def pubsub(self, **kwargs):
        return self

    async def subscribe(self, *channels):
        raise RedisConnectionError("Connection refused")


class RecordingRedis:
    def __init__(self):
        self.published = []

    async def publish(self, channel, message):
        self.published.append((channel, message))
        return 1


class TestInMemoryBus:
    async def test_predicate_filters_on_the_server_side(self):
        bus = InMemoryFanoutBus()
        subscription = await bus.subscribe(Topic.NOTIFICATIONS, field_equals("user_id", "alice"))

        await bus.publish_change(Topic.NOTIFICATIONS, ChangeType.INSERT, {"id": "1", "user_id": "bob"})
        await bus.publish_change(Topic.NOTIFICATIONS, ChangeType.INSERT, {"id": "2", "user_id": "alice"})

        event = await asyncio.wait_for(anext(subscription), 1)
        assert event.record["id"] == "2"

    async def test_topics_are_isolated(self):
        bus = InMemoryFanoutBus()
        subscription = await bus.subscribe(Topic.COMMENTS)

        await bus.publish_change(Topic.ISSUES, ChangeType.UPDATE, {"id": "1"})

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(subscription), 0.1)

    async def test_every_subscriber_receives_the_event(self):
        bus = InMemoryFanoutBus()
        first = await bus.subscribe(Topic.ISSUES)
        second = await bus.subscribe(Topic.ISSUES)

        await bus.publish_change(Topic.ISSUES, ChangeType.INSERT, {"id": "1"})

        assert (await asyncio.wait_for(anext(first), 1)).record == {"id": "1"}
        assert (await asyncio.wait_for(anext(second), 1)).record == {"id": "1"}

    async def test_close_ends_iteration_and_detaches(self):
        bus = InMemoryFanoutBus()
        subscription = await bus.subscribe(Topic.ISSUES)

        await subscription.close()

        assert bus.subscriber_count(Topic.ISSUES) == 0
        with pytest.raises(StopAsyncIteration):
            await anext(subscription)

    async def test_closing_the_bus_ends_all_subscriptions(self):
        bus = InMemoryFanoutBus()
        subscription = await bus.subscribe(Topic.VOTES)

        await bus.close()

        received = [event async for event in subscription]
        assert received == []

    async def test_delete_events_match_on_old_record(self):
        bus = InMemoryFanoutBus()
        subscription = await bus.subscribe(Topic.VOTES, field_equals("issue_id", "issue-1"))

        await bus.publish_change(Topic.VOTES, ChangeType.DELETE, {}, old_record={"issue_id": "issue-1"})

        event = await asyncio.wait_for(anext(subscription), 1)
        assert event.event_type == ChangeType.DELETE


class TestRedisBus:
    def test_channel_per_topic(self):
        bus = RedisFanoutBus(RecordingRedis(), "civiclink")

        assert bus.channel(Topic.NOTIFICATIONS) == "civiclink:notifications"
        assert bus.channel(Topic.VOTES) == "civiclink:issue_upvotes"

    async def test_publish_serializes_event(self):
        client = RecordingRedis()
        bus = RedisFanoutBus(client, "civiclink")

        await bus.publish_change(Topic.ISSUES, ChangeType.UPDATE, {"id": "1", "upvotes": 3})

        channel, message = client.published[0]
        event = ChangeEvent.model_validate_json(message)
        assert channel == "civiclink:issues"
        assert event.record == {"id": "1", "upvotes": 3}

    async def test_publish_failure_is_transient(self):
        bus = RedisFanoutBus(UnreachableRedis(), "civiclink")

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await bus.publish_change(Topic.ISSUES, ChangeType.INSERT, {"id": "1"})

        assert exc_info.value.transient is True

    async def test_subscribe_failure_is_transient(self):
        bus = RedisFanoutBus(UnreachableRedis(), "civiclink")

        with pytest.raises(UpstreamUnavailable):
            await bus.subscribe(Topic.ISSUES)


class IdleWebSocket:
    """Connected client that never sends anything."""

    def __init__(self):
        self.sent = []

    async def receive(self):
        await asyncio.Event().wait()

    async def send_json(self, data):
        self.sent.append(data)

    async def close(self, code=1000):
        pass


class TestPump:
    async def test_cancelled_pump_leaves_no_tasks_behind(self):
        bus = InMemoryFanoutBus()
        websocket = IdleWebSocket()
        subscription = await bus.subscribe(Topic.ISSUES)
        before = asyncio.all_tasks()

        stream = asyncio.create_task(pump(websocket, [subscription]))
        await bus.publish_change(Topic.ISSUES, ChangeType.INSERT, {"id": "1"})
        for _ in range(10):
            await asyncio.sleep(0)
        stream.cancel()
        with pytest.raises(asyncio.CancelledError):
            await stream

        assert websocket.sent[0]["record"] == {"id": "1"}
        assert asyncio.all_tasks() == before
        assert bus.subscriber_count(Topic.ISSUES) == 0
