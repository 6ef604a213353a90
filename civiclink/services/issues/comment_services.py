# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.exceptions import Forbidden, NotFound, ValidationFailed
from civiclink.core.identity import Actor, require_actor
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import ChangeType, FanoutBus, Topic, to_record
from civiclink.db_selectors.comments import get_comment_by_id, list_comments_for_issue
from civiclink.db_selectors.issues import get_issue_or_404
from civiclink.models.issues.comment import Comment
from civiclink.services.notifications.dispatcher import CommentPosted, NotificationDispatcher
from civiclink.settings import settings


def validate_comment_text(text: str) -> str:
    """Trim ``text`` and check it against the comment length bounds."""
    trimmed = (text or "").strip()
    if not settings.COMMENT_MIN_LENGTH <= len(trimmed) <= settings.COMMENT_MAX_LENGTH:
        raise ValidationFailed(
            f"Comment must be between {settings.COMMENT_MIN_LENGTH} and {settings.COMMENT_MAX_LENGTH} characters",
            details={"field": "comment", "length": len(trimmed)},
        )
    return trimmed


async def _get_own_comment(db: AsyncSession, actor: Actor, comment_id: UUID) -> Comment:
    comment = await get_comment_by_id(db, comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    if comment.author_id != actor.id:
        raise Forbidden("Only the author can change this comment")
    return comment


async def list_comments(db: AsyncSession, issue_id: UUID) -> list[Comment]:
    with translate_store_errors("list comments"):
        await get_issue_or_404(db, issue_id)
        return await list_comments_for_issue(db, issue_id)


async def post_comment(
    db: AsyncSession,
    bus: FanoutBus,
    dispatcher: NotificationDispatcher,
    actor: Actor | None,
    issue_id: UUID,
    text: str,
) -> Comment:
    """
    Post a comment carrying a snapshot of the issue's current status.

    Raises:
        Unauthorized: no actor.
        ValidationFailed: the trimmed text is empty or too long; nothing is stored.
        NotFound: the issue does not exist.
    """
    actor = require_actor(actor)
    text = validate_comment_text(text)
    logger = get_contextual_logger(__name__, issue_id=issue_id, user_id=actor.id)

    with translate_store_errors("post comment"):
        issue = await get_issue_or_404(db, issue_id)
        comment = Comment(issue_id=issue.id, author_id=actor.id, comment=text, status=issue.status)
        db.add(comment)
        await db.commit()
        await db.refresh(comment)

    logger.info(f"Comment {comment.id} posted")
    await bus.publish_change(Topic.COMMENTS, ChangeType.INSERT, to_record(comment))
    await dispatcher.on_event(
        db,
        CommentPosted(issue_id=issue.id, actor_id=actor.id, comment_id=comment.id, comment=text),
    )
    return comment


async def edit_comment(db: AsyncSession, bus: FanoutBus, actor: Actor | None, comment_id: UUID, text: str) -> Comment:
    actor = require_actor(actor)
    text = validate_comment_text(text)

    with translate_store_errors("edit comment"):
        comment = await _get_own_comment(db, actor, comment_id)
        old_record = to_record(comment)
        comment.comment = text
        await db.commit()
        await db.refresh(comment)

    await bus.publish_change(Topic.COMMENTS, ChangeType.UPDATE, to_record(comment), old_record=old_record)
    return comment


async def delete_comment(db: AsyncSession, bus: FanoutBus, actor: Actor | None, comment_id: UUID) -> None:
    actor = require_actor(actor)

    with translate_store_errors("delete comment"):
        comment = await _get_own_comment(db, actor, comment_id)
        old_record = to_record(comment)
        await db.delete(comment)
        await db.commit()

    get_contextual_logger(__name__, issue_id=old_record["issue_id"], user_id=actor.id).info(
        f"Comment {comment_id} deleted"
    )
    await bus.publish_change(Topic.COMMENTS, ChangeType.DELETE, {}, old_record=old_record)
