# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.models.notifications.notification import Notification


async def get_notification_by_id(db: AsyncSession, notification_id: UUID) -> Notification | None:
    result = await db.execute(select(Notification).where(Notification.id == notification_id))
    return result.scalar_one_or_none()


async def list_notifications_for_user(db: AsyncSession, user_id: UUID, limit: int) -> list[Notification]:
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id)
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_unread_notification_ids(db: AsyncSession, user_id: UUID) -> list[UUID]:
    result = await db.execute(
        select(Notification.id).where(and_(Notification.user_id == user_id, Notification.read.is_(False)))
    )
    return list(result.scalars().all())


async def count_unread_notifications(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(and_(Notification.user_id == user_id, Notification.read.is_(False)))
    )
    return int(result.scalar_one())
