"""
Vote ledger.

A vote is a row in ``issue_upvotes`` keyed by (issue_id, user_id); the row
existing means the user currently upvotes the issue. ``Issue.upvotes`` is a
cache of the ledger cardinality. It is always recomputed with a COUNT query
after a write and never incremented, so concurrent voters cannot lose each
other's updates.
"""

# Standard library imports
from dataclasses import dataclass
from typing import Any
from uuid import UUID

# Third-party imports
from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.identity import Actor, require_actor
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import ChangeType, FanoutBus, Topic, to_record
from civiclink.db_selectors.issues import count_votes_for_issue, count_votes_for_issues, get_issue_or_404, get_vote
from civiclink.models.issues.issue import Issue
from civiclink.models.issues.vote import Vote


@dataclass(frozen=True)
class VoteToggleResult:
    issue_id: UUID
    active: bool
    new_count: int


async def _apply_toggle(
    db: AsyncSession,
    issue_id: UUID,
    user_id: UUID,
) -> tuple[bool, tuple[ChangeType, dict[str, Any]] | None]:
    existing = await get_vote(db, issue_id, user_id)

    if existing is not None:
        record = to_record(existing)
        result = await db.execute(
            delete(Vote)
            .where(and_(Vote.issue_id == issue_id, Vote.user_id == user_id))
            .execution_options(synchronize_session=False)
        )
        db.expunge(existing)
        await db.commit()
        # rowcount 0: a concurrent toggle from the same user already removed it
        return False, (ChangeType.DELETE, record) if result.rowcount else None

    vote = Vote(issue_id=issue_id, user_id=user_id)
    db.add(vote)
    await db.commit()
    return True, (ChangeType.INSERT, to_record(vote))


async def reconcile_vote_count(db: AsyncSession, issue_id: UUID) -> int:
    """
    Re-derive an issue's vote count from the ledger and store it on the issue.

    The stored counter is a cache: if writing it fails the ledger count is
    still returned.
    """
    with translate_store_errors("count votes"):
        count = await count_votes_for_issue(db, issue_id)

    try:
        await db.execute(update(Issue).where(Issue.id == issue_id).values(upvotes=count))
        await db.commit()
    except SQLAlchemyError as e:
        logger = get_contextual_logger(__name__, issue_id=issue_id)
        logger.warning(f"Could not refresh cached vote count to {count}: {e}")
        await db.rollback()
    return count


async def reconcile_issue_counts(db: AsyncSession, issues: list[Issue]) -> list[Issue]:
    """Bring the cached counters of already-loaded issues in line with the ledger."""
    with translate_store_errors("count votes"):
        counts = await count_votes_for_issues(db, [issue.id for issue in issues])

    stale = [issue for issue in issues if issue.upvotes != counts[issue.id]]
    if not stale:
        return issues

    for issue in stale:
        issue.upvotes = counts[issue.id]
    try:
        await db.commit()
    except SQLAlchemyError as e:
        get_contextual_logger(__name__).warning(f"Could not refresh {len(stale)} cached vote count(s): {e}")
        await db.rollback()
        # Keep serving the ledger values even though the cache write failed
        for issue in stale:
            issue.upvotes = counts[issue.id]
    return issues


async def toggle_vote(db: AsyncSession, bus: FanoutBus, actor: Actor | None, issue_id: UUID) -> VoteToggleResult:
    """
    Add the actor's vote if absent, remove it if present.

    Two concurrent toggles from the same user race on the unique
    (issue_id, user_id) key; the loser re-reads the ledger once and reports
    the winner's state instead of failing.

    Raises:
        Unauthorized: no actor.
        NotFound: the issue does not exist.
        UpstreamUnavailable: the store or the bus is unreachable.
    """
    actor = require_actor(actor)
    logger = get_contextual_logger(__name__, issue_id=issue_id, user_id=actor.id)

    with translate_store_errors("toggle vote"):
        await get_issue_or_404(db, issue_id)
        try:
            active, change = await _apply_toggle(db, issue_id, actor.id)
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent vote on the same key won, re-reading ledger")
            active = await get_vote(db, issue_id, actor.id) is not None
            change = None

    new_count = await reconcile_vote_count(db, issue_id)
    logger.info(f"Vote {'added' if active else 'removed'}, count now {new_count}")

    if change is not None:
        change_type, record = change
        if change_type == ChangeType.DELETE:
            await bus.publish_change(Topic.VOTES, change_type, {}, old_record=record)
        else:
            await bus.publish_change(Topic.VOTES, change_type, record)
    await bus.publish_change(Topic.ISSUES, ChangeType.UPDATE, {"id": str(issue_id), "upvotes": new_count})

    return VoteToggleResult(issue_id=issue_id, active=active, new_count=new_count)


async def get_vote_state(db: AsyncSession, actor: Actor | None, issue_id: UUID) -> VoteToggleResult:
    actor = require_actor(actor)
    with translate_store_errors("read vote"):
        await get_issue_or_404(db, issue_id)
        active = await get_vote(db, issue_id, actor.id) is not None
        count = await count_votes_for_issue(db, issue_id)
    return VoteToggleResult(issue_id=issue_id, active=active, new_count=count)


async def reconcile_all_vote_counts(db: AsyncSession) -> int:
    """Repair every stale cached counter in one statement. Returns the number of issues fixed."""
    ledger_count = select(func.count()).select_from(Vote).where(Vote.issue_id == Issue.id).scalar_subquery()
    with translate_store_errors("reconcile vote counts"):
        result = await db.execute(
            update(Issue)
            .where(Issue.upvotes != ledger_count)
            .values(upvotes=ledger_count)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    return result.rowcount or 0
