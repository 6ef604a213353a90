"""
Issue lifecycle engine.

Status moves forward only::

    pending -> in_progress -> resolved
    pending / in_progress -> rejected

``resolved`` and ``rejected`` are terminal. Only administrators change the
status or the assigned department.
"""

# Standard library imports
from datetime import UTC, datetime
from uuid import UUID

# Third-party imports
from sqlalchemy import and_, update
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.exceptions import Conflict, ValidationFailed
from civiclink.core.identity import Actor, require_admin
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import ChangeType, FanoutBus, Topic, to_record
from civiclink.db_selectors.issues import count_issues_by_status, get_issue_or_404
from civiclink.models.issues.comment import Comment
from civiclink.models.issues.issue import Issue, IssueStatus
from civiclink.schemas.issues import IssueStats
from civiclink.services.issues.comment_services import validate_comment_text
from civiclink.services.notifications.dispatcher import IssueAssigned, IssueStatusChanged, NotificationDispatcher

ALLOWED_TRANSITIONS: dict[IssueStatus, list[IssueStatus]] = {
    IssueStatus.PENDING: [IssueStatus.IN_PROGRESS, IssueStatus.REJECTED],
    IssueStatus.IN_PROGRESS: [IssueStatus.RESOLVED, IssueStatus.REJECTED],
    IssueStatus.RESOLVED: [],
    IssueStatus.REJECTED: [],
}

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)


class InvalidTransition(ValidationFailed):
    default_message = "Status transition not allowed"


def get_allowed_transitions(status: IssueStatus) -> list[IssueStatus]:
    return list(ALLOWED_TRANSITIONS.get(status, []))


def is_valid_transition(from_status: IssueStatus, to_status: IssueStatus) -> bool:
    # Same-state requests are not transitions
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


async def change_status(
    db: AsyncSession,
    bus: FanoutBus,
    dispatcher: NotificationDispatcher,
    actor: Actor | None,
    issue_id: UUID,
    new_status: IssueStatus,
    note: str | None = None,
) -> Issue:
    """
    Move an issue to ``new_status``.

    The write is a compare-and-set on the status that was read, so two admins
    racing on the same issue cannot both apply a transition from the same
    starting state.

    Raises:
        Unauthorized: no actor.
        Forbidden: the actor is not an administrator.
        NotFound: the issue does not exist.
        InvalidTransition: ``new_status`` is not reachable from the current status.
        Conflict: the status changed between the read and the write.
    """
    actor = require_admin(actor)
    if note is not None:
        note = validate_comment_text(note)
    logger = get_contextual_logger(__name__, issue_id=issue_id, user_id=actor.id)

    with translate_store_errors("change status"):
        issue = await get_issue_or_404(db, issue_id)
        old_status = IssueStatus(issue.status)

        if not is_valid_transition(old_status, new_status):
            allowed = get_allowed_transitions(old_status)
            logger.info(f"Rejected transition {old_status.value} -> {new_status.value}")
            raise InvalidTransition(
                f"Cannot move issue from {old_status.value} to {new_status.value}",
                details={
                    "current": old_status.value,
                    "requested": new_status.value,
                    "allowed": [status.value for status in allowed],
                },
            )

        old_record = to_record(issue)
        values: dict = {"status": new_status, "updated_at": datetime.now(UTC)}
        if new_status == IssueStatus.RESOLVED:
            values["resolved_at"] = datetime.now(UTC)

        result = await db.execute(
            update(Issue)
            .where(and_(Issue.id == issue_id, Issue.status == old_status))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            await db.rollback()
            raise Conflict("Issue status changed concurrently, reload and retry")

        if note:
            db.add(Comment(issue_id=issue_id, author_id=actor.id, comment=note, status=new_status))
        await db.commit()
        await db.refresh(issue)

    logger.info(f"Status changed {old_status.value} -> {new_status.value}")
    await bus.publish_change(Topic.ISSUES, ChangeType.UPDATE, to_record(issue), old_record=old_record)
    await dispatcher.on_event(
        db,
        IssueStatusChanged(
            issue_id=issue_id,
            actor_id=actor.id,
            old_status=old_status,
            new_status=new_status,
            note=note,
        ),
    )
    return issue


async def assign_department(
    db: AsyncSession,
    bus: FanoutBus,
    dispatcher: NotificationDispatcher,
    actor: Actor | None,
    issue_id: UUID,
    department: str,
) -> Issue:
    actor = require_admin(actor)
    department = (department or "").strip()
    if not department:
        raise ValidationFailed("Department is required", details={"field": "department"})

    with translate_store_errors("assign department"):
        issue = await get_issue_or_404(db, issue_id)
        if issue.department == department:
            return issue

        old_record = to_record(issue)
        issue.department = department
        await db.commit()
        await db.refresh(issue)

    get_contextual_logger(__name__, issue_id=issue_id, user_id=actor.id).info(f"Assigned to {department}")
    await bus.publish_change(Topic.ISSUES, ChangeType.UPDATE, to_record(issue), old_record=old_record)
    await dispatcher.on_event(db, IssueAssigned(issue_id=issue_id, actor_id=actor.id, department=department))
    return issue


async def issue_stats(db: AsyncSession, actor: Actor | None) -> IssueStats:
    require_admin(actor)
    with translate_store_errors("issue stats"):
        counts = await count_issues_by_status(db)
    return IssueStats(
        total=sum(counts.values()),
        pending=counts.get(IssueStatus.PENDING, 0),
        in_progress=counts.get(IssueStatus.IN_PROGRESS, 0),
        resolved=counts.get(IssueStatus.RESOLVED, 0),
        rejected=counts.get(IssueStatus.REJECTED, 0),
    )


async def issue_transitions(
    db: AsyncSession, actor: Actor | None, issue_id: UUID
) -> tuple[IssueStatus, list[IssueStatus]]:
    """Current status of an issue and the statuses it may move to next."""
    require_admin(actor)
    with translate_store_errors("issue transitions"):
        issue = await get_issue_or_404(db, issue_id)
    return issue.status, get_allowed_transitions(issue.status)
