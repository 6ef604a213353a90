"""End-to-end flows through the service layer."""

import asyncio
from uuid import uuid4

import pytest

from civiclink.core.exceptions import ValidationFailed
from civiclink.core.identity import Actor
from civiclink.db_selectors.issues import count_votes_for_issue, get_vote
from civiclink.models.issues.issue import IssueStatus
from civiclink.services.issues import change_status, get_issue, report_issue, toggle_vote
from civiclink.services.notifications import list_notifications
from tests.helpers import make_issue_payload


class TestIssueJourney:
    async def test_report_vote_and_resolve(self, db, bus, dispatcher, admin):
        user_a, user_b = Actor(id=uuid4()), Actor(id=uuid4())

        issue = await report_issue(db, bus, user_a, make_issue_payload())
        assert issue.status == IssueStatus.PENDING
        assert issue.upvotes == 0

        first = await toggle_vote(db, bus, user_b, issue.id)
        assert (first.active, first.new_count) == (True, 1)

        second = await toggle_vote(db, bus, user_b, issue.id)
        assert (second.active, second.new_count) == (False, 0)

        await change_status(db, bus, dispatcher, admin, issue.id, IssueStatus.IN_PROGRESS)
        resolved = await change_status(db, bus, dispatcher, admin, issue.id, IssueStatus.RESOLVED)
        assert resolved.resolved_at is not None
        resolved_at = resolved.resolved_at

        with pytest.raises(ValidationFailed):
            await change_status(db, bus, dispatcher, admin, issue.id, IssueStatus.PENDING)

        final = await get_issue(db, issue.id)
        assert final.status == IssueStatus.RESOLVED
        assert final.resolved_at == resolved_at
        assert final.upvotes == 0

        # Reporter heard about both transitions
        messages = [n.message for n in await list_notifications(db, user_a)]
        assert len(messages) == 2
        assert any("to resolved" in message for message in messages)

    async def test_concurrent_votes_from_zero(self, session_factory, bus, issue):
        voters = [Actor(id=uuid4()), Actor(id=uuid4())]

        async def vote(actor):
            async with session_factory() as session:
                return await toggle_vote(session, bus, actor, issue.id)

        await asyncio.gather(*(vote(voter) for voter in voters))

        async with session_factory() as session:
            assert await count_votes_for_issue(session, issue.id) == 2
            for voter in voters:
                assert await get_vote(session, issue.id, voter.id) is not None
            assert (await get_issue(session, issue.id)).upvotes == 2
