import asyncio
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from civiclink.core.exceptions import Unauthorized, ValidationFailed
from civiclink.core.realtime import Topic
from civiclink.db_selectors.issues import get_issue_by_id
from civiclink.db_selectors.profiles import get_profile_by_id
from civiclink.models.issues.issue import IssueStatus
from civiclink.services.issues import list_issues, report_issue
from civiclink.services.rewards import award_points, award_points_best_effort, leaderboard
from civiclink.services.rewards import points_services
from tests.helpers import make_issue_payload


class TestAwardPoints:
    async def test_first_award_creates_profile(self, db):
        user_id = uuid4()

        assert await award_points(db, user_id, 10) == 10
        assert (await get_profile_by_id(db, user_id)).points == 10

    async def test_awards_accumulate(self, db):
        user_id = uuid4()

        await award_points(db, user_id, 10)
        assert await award_points(db, user_id, 5) == 15

    async def test_best_effort_swallows_store_errors(self, db, monkeypatch):
        async def broken_award(*args, **kwargs):
            raise OperationalError("UPDATE profiles", {}, Exception("disk I/O error"))

        monkeypatch.setattr(points_services, "award_points", broken_award)

        assert await award_points_best_effort(db, uuid4(), 10) is False


class TestReportIssue:
    async def test_reporter_earns_points(self, db, issue, reporter):
        assert (await get_profile_by_id(db, reporter.id)).points == 10
        assert issue.reporter_id == reporter.id

    async def test_report_stands_when_award_fails(self, db, bus, reporter, monkeypatch):
        async def broken_award(*args, **kwargs):
            raise OperationalError("UPDATE profiles", {}, Exception("disk I/O error"))

        monkeypatch.setattr(points_services, "award_points", broken_award)

        issues = await bus.subscribe(Topic.ISSUES)

        issue = await report_issue(db, bus, reporter, make_issue_payload())

        # The returned issue stays loaded and the insert is still published
        assert issue.status == IssueStatus.PENDING
        assert issue.title == "Pothole on Main Street"
        event = await asyncio.wait_for(anext(issues), 1)
        assert event.record["id"] == str(issue.id)
        assert await get_issue_by_id(db, issue.id) is not None
        assert await get_profile_by_id(db, reporter.id) is None

    async def test_anonymous_report(self, db, bus):
        with pytest.raises(Unauthorized):
            await report_issue(db, bus, None, make_issue_payload())

    @pytest.mark.parametrize(
        "overrides",
        [{"title": "ab"}, {"title": "x" * 201}, {"description": "too short"}, {"title": "   Ho   "}],
    )
    async def test_invalid_payload_stores_nothing(self, db, bus, reporter, overrides):
        with pytest.raises(ValidationFailed):
            await report_issue(db, bus, reporter, make_issue_payload(**overrides))

        _, total = await list_issues(db)
        assert total == 0
        assert await get_profile_by_id(db, reporter.id) is None


class TestLeaderboard:
    async def test_ranked_by_points(self, db):
        low, high, middle = uuid4(), uuid4(), uuid4()
        await award_points(db, low, 5)
        await award_points(db, high, 30)
        await award_points(db, middle, 20)

        entries = await leaderboard(db, limit=2)

        assert [(entry.rank, entry.user_id, entry.points) for entry in entries] == [(1, high, 30), (2, middle, 20)]
