"""
Notification dispatcher.

Turns lifecycle and engagement events into one ``Notification`` row per
recipient and publishes each row on the ``notifications`` topic. Subscribers
only ever see rows addressed to them: the websocket layer subscribes with a
``user_id`` predicate built from the authenticated actor.

Repeated identical events are not suppressed; every qualifying event
notifies every recipient exactly once.
"""

# Standard library imports
from dataclasses import dataclass
from uuid import UUID

# Third-party imports
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import ChangeType, FanoutBus, Topic, to_record
from civiclink.db_selectors.comments import get_comment_participants
from civiclink.db_selectors.issues import get_issue_or_404
from civiclink.models.issues.issue import Issue, IssueStatus
from civiclink.models.notifications.notification import Notification

MESSAGE_PREVIEW_LENGTH = 100


@dataclass(frozen=True)
class IssueStatusChanged:
    issue_id: UUID
    actor_id: UUID
    old_status: IssueStatus
    new_status: IssueStatus
    note: str | None = None


@dataclass(frozen=True)
class CommentPosted:
    issue_id: UUID
    actor_id: UUID
    comment_id: UUID
    comment: str


@dataclass(frozen=True)
class IssueAssigned:
    issue_id: UUID
    actor_id: UUID
    department: str


IssueEvent = IssueStatusChanged | CommentPosted | IssueAssigned


def _status_label(status: IssueStatus) -> str:
    return status.value.replace("_", " ")


def _preview(text: str) -> str:
    if len(text) <= MESSAGE_PREVIEW_LENGTH:
        return text
    return text[: MESSAGE_PREVIEW_LENGTH - 3].rstrip() + "..."


def render(event: IssueEvent, issue: Issue) -> tuple[str, str]:
    """Title and message for a notification about ``event`` on ``issue``."""
    if isinstance(event, IssueStatusChanged):
        message = f'"{issue.title}" moved from {_status_label(event.old_status)} to {_status_label(event.new_status)}.'
        if event.note:
            message = f"{message} Note: {_preview(event.note)}"
        return "Issue status updated", message

    if isinstance(event, CommentPosted):
        return "New comment on an issue", f'New comment on "{issue.title}": {_preview(event.comment)}'

    if isinstance(event, IssueAssigned):
        return "Issue assigned", f'"{issue.title}" was assigned to {event.department}.'

    raise TypeError(f"Unsupported event type: {type(event).__name__}")


class NotificationDispatcher:
    def __init__(self, bus: FanoutBus) -> None:
        self.bus = bus

    async def resolve_recipients(self, db: AsyncSession, event: IssueEvent, issue: Issue) -> list[UUID]:
        """
        The reporter first, then (for comments) earlier participants.

        The actor is never notified about their own action and each user
        appears once.
        """
        candidates = [issue.reporter_id]
        if isinstance(event, CommentPosted):
            candidates.extend(await get_comment_participants(db, issue.id, exclude_comment_id=event.comment_id))

        recipients: list[UUID] = []
        for user_id in candidates:
            if user_id != event.actor_id and user_id not in recipients:
                recipients.append(user_id)
        return recipients

    async def on_event(self, db: AsyncSession, event: IssueEvent) -> list[Notification]:
        logger = get_contextual_logger(__name__, issue_id=event.issue_id, user_id=event.actor_id)

        with translate_store_errors("dispatch notifications"):
            issue = await get_issue_or_404(db, event.issue_id)
            recipients = await self.resolve_recipients(db, event, issue)
            if not recipients:
                logger.debug(f"No recipients for {type(event).__name__}")
                return []

            title, message = render(event, issue)
            notifications = [
                Notification(user_id=user_id, issue_id=issue.id, title=title, message=message)
                for user_id in recipients
            ]
            db.add_all(notifications)
            await db.commit()

        for notification in notifications:
            await self.bus.publish_change(Topic.NOTIFICATIONS, ChangeType.INSERT, to_record(notification))

        logger.info(f"Dispatched {type(event).__name__} to {len(notifications)} recipient(s)")
        return notifications
