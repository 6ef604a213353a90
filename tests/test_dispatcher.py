"""
Notification dispatcher and inbox tests.

Recipients are the reporter plus earlier commenters, never the actor, each
notified once per event.
"""

import asyncio
from uuid import uuid4

import pytest

from civiclink.core.exceptions import NotFound, Unauthorized
from civiclink.core.realtime import ChangeType, Topic, field_equals
from civiclink.models.issues.issue import IssueStatus
from civiclink.services.issues import change_status, post_comment
from civiclink.services.notifications import (
    CommentPosted,
    IssueStatusChanged,
    list_notifications,
    mark_all_read,
    mark_read,
    unread_count,
)
from civiclink.services.notifications.dispatcher import render


class TestRender:
    async def test_status_change(self, issue):
        event = IssueStatusChanged(
            issue_id=issue.id,
            actor_id=uuid4(),
            old_status=IssueStatus.PENDING,
            new_status=IssueStatus.IN_PROGRESS,
        )

        title, message = render(event, issue)

        assert title == "Issue status updated"
        assert message == f'"{issue.title}" moved from pending to in progress.'

    async def test_comment_preview_is_truncated(self, issue):
        event = CommentPosted(issue_id=issue.id, actor_id=uuid4(), comment_id=uuid4(), comment="word " * 60)

        title, message = render(event, issue)

        assert title == "New comment on an issue"
        assert message.endswith("...")
        preview = message.split(": ", 1)[1]
        assert len(preview) <= 100

    async def test_unknown_event(self, issue):
        with pytest.raises(TypeError):
            render(object(), issue)


class TestRecipients:
    async def test_actor_is_not_notified_of_own_comment(self, db, bus, dispatcher, issue, reporter):
        await post_comment(db, bus, dispatcher, reporter, issue.id, "Adding a photo later")

        assert await list_notifications(db, reporter) == []

    async def test_reporter_and_participants_are_notified(
        self, db, bus, dispatcher, issue, reporter, citizen, other_citizen
    ):
        await post_comment(db, bus, dispatcher, citizen, issue.id, "Same here")
        await post_comment(db, bus, dispatcher, other_citizen, issue.id, "Saw it too")

        reporter_inbox = await list_notifications(db, reporter)
        citizen_inbox = await list_notifications(db, citizen)

        assert len(reporter_inbox) == 2
        assert len(citizen_inbox) == 1
        assert "Saw it too" in citizen_inbox[0].message
        assert await list_notifications(db, other_citizen) == []

    async def test_repeat_participant_is_notified_once_per_event(self, db, bus, dispatcher, issue, reporter, citizen):
        await post_comment(db, bus, dispatcher, citizen, issue.id, "first")
        await post_comment(db, bus, dispatcher, citizen, issue.id, "second")
        await post_comment(db, bus, dispatcher, reporter, issue.id, "thanks")

        # One per citizen comment for the reporter, one for the reporter's reply
        assert len(await list_notifications(db, reporter)) == 2
        assert len(await list_notifications(db, citizen)) == 1

    async def test_identical_events_are_not_collapsed(self, db, bus, dispatcher, issue, citizen, reporter):
        await post_comment(db, bus, dispatcher, citizen, issue.id, "+1")
        await post_comment(db, bus, dispatcher, citizen, issue.id, "+1")

        assert len(await list_notifications(db, reporter)) == 2

    async def test_status_change_only_reaches_reporter(self, db, bus, dispatcher, issue, admin, reporter, citizen):
        await post_comment(db, bus, dispatcher, citizen, issue.id, "Any news?")

        await change_status(db, bus, dispatcher, admin, issue.id, IssueStatus.IN_PROGRESS)

        assert len(await list_notifications(db, reporter)) == 2
        assert await list_notifications(db, citizen) == []

    async def test_published_rows_carry_recipient(self, db, bus, dispatcher, issue, reporter, citizen):
        mine = await bus.subscribe(Topic.NOTIFICATIONS, field_equals("user_id", reporter.id))
        theirs = await bus.subscribe(Topic.NOTIFICATIONS, field_equals("user_id", citizen.id))

        await post_comment(db, bus, dispatcher, citizen, issue.id, "hello")
        event = await asyncio.wait_for(anext(mine), 1)

        assert event.event_type == ChangeType.INSERT
        assert event.record["user_id"] == str(reporter.id)
        assert event.record["read"] is False
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(theirs), 0.1)


class TestInbox:
    async def _notify_reporter(self, db, bus, dispatcher, issue, author, count):
        for index in range(count):
            await post_comment(db, bus, dispatcher, author, issue.id, f"comment {index}")

    async def test_unread_count_and_mark_read(self, db, bus, dispatcher, issue, reporter, citizen):
        await self._notify_reporter(db, bus, dispatcher, issue, citizen, 2)
        assert await unread_count(db, reporter) == 2

        notification = (await list_notifications(db, reporter))[0]
        updated = await mark_read(db, bus, reporter, notification.id)

        assert updated.read is True
        assert await unread_count(db, reporter) == 1

    async def test_mark_read_is_idempotent(self, db, bus, dispatcher, issue, reporter, citizen):
        await self._notify_reporter(db, bus, dispatcher, issue, citizen, 1)
        notification = (await list_notifications(db, reporter))[0]

        await mark_read(db, bus, reporter, notification.id)
        again = await mark_read(db, bus, reporter, notification.id)

        assert again.read is True
        assert await unread_count(db, reporter) == 0

    async def test_cannot_read_someone_elses_notification(self, db, bus, dispatcher, issue, reporter, citizen):
        await self._notify_reporter(db, bus, dispatcher, issue, citizen, 1)
        notification = (await list_notifications(db, reporter))[0]

        with pytest.raises(NotFound):
            await mark_read(db, bus, citizen, notification.id)
        assert await unread_count(db, reporter) == 1

    async def test_mark_all_read(self, db, bus, dispatcher, issue, reporter, citizen):
        await self._notify_reporter(db, bus, dispatcher, issue, citizen, 3)
        updates = await bus.subscribe(Topic.NOTIFICATIONS, lambda event: event.event_type == ChangeType.UPDATE)

        assert await mark_all_read(db, bus, reporter) == 3
        assert await unread_count(db, reporter) == 0
        assert await mark_all_read(db, bus, reporter) == 0

        event = await asyncio.wait_for(anext(updates), 1)
        assert event.record["user_id"] == str(reporter.id)
        assert event.record["read"] is True

    async def test_list_respects_limit(self, db, bus, dispatcher, issue, reporter, citizen):
        await self._notify_reporter(db, bus, dispatcher, issue, citizen, 3)

        assert len(await list_notifications(db, reporter, limit=2)) == 2

    async def test_anonymous_inbox(self, db):
        with pytest.raises(Unauthorized):
            await unread_count(db, None)
