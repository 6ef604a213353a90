# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.models.issues.comment import Comment


async def get_comment_by_id(db: AsyncSession, comment_id: UUID) -> Comment | None:
    result = await db.execute(select(Comment).where(Comment.id == comment_id))
    return result.scalar_one_or_none()


async def list_comments_for_issue(db: AsyncSession, issue_id: UUID) -> list[Comment]:
    result = await db.execute(
        select(Comment).where(Comment.issue_id == issue_id).order_by(Comment.created_at.desc(), Comment.id)
    )
    return list(result.scalars().all())


async def get_comment_participants(
    db: AsyncSession,
    issue_id: UUID,
    exclude_comment_id: UUID | None = None,
) -> list[UUID]:
    """Distinct comment authors on an issue, in order of their first comment."""
    query = select(Comment.author_id).where(Comment.issue_id == issue_id)
    if exclude_comment_id is not None:
        query = query.where(Comment.id != exclude_comment_id)
    query = query.group_by(Comment.author_id).order_by(func.min(Comment.created_at))
    result = await db.execute(query)
    return list(result.scalars().all())
