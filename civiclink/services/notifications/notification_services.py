# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import and_, update
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.exceptions import NotFound
from civiclink.core.identity import Actor, require_actor
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import ChangeType, FanoutBus, Topic, to_record
from civiclink.db_selectors.notifications import (
    count_unread_notifications,
    get_notification_by_id,
    list_notifications_for_user,
    list_unread_notification_ids,
)
from civiclink.models.notifications.notification import Notification
from civiclink.settings import settings


async def list_notifications(db: AsyncSession, actor: Actor | None, limit: int | None = None) -> list[Notification]:
    actor = require_actor(actor)
    with translate_store_errors("list notifications"):
        return await list_notifications_for_user(db, actor.id, limit or settings.NOTIFICATIONS_PAGE_SIZE)


async def unread_count(db: AsyncSession, actor: Actor | None) -> int:
    actor = require_actor(actor)
    with translate_store_errors("count notifications"):
        return await count_unread_notifications(db, actor.id)


async def mark_read(db: AsyncSession, bus: FanoutBus, actor: Actor | None, notification_id: UUID) -> Notification:
    """
    Mark one of the actor's notifications as read.

    A notification addressed to someone else is reported as missing so its
    existence is not revealed.
    """
    actor = require_actor(actor)

    with translate_store_errors("mark notification read"):
        notification = await get_notification_by_id(db, notification_id)
        if notification is None or notification.user_id != actor.id:
            raise NotFound("Notification not found")

        if notification.read:
            return notification

        old_record = to_record(notification)
        notification.read = True
        await db.commit()
        await db.refresh(notification)

    await bus.publish_change(Topic.NOTIFICATIONS, ChangeType.UPDATE, to_record(notification), old_record=old_record)
    return notification


async def mark_all_read(db: AsyncSession, bus: FanoutBus, actor: Actor | None) -> int:
    actor = require_actor(actor)
    logger = get_contextual_logger(__name__, user_id=actor.id)

    with translate_store_errors("mark all notifications read"):
        unread_ids = await list_unread_notification_ids(db, actor.id)
        if not unread_ids:
            return 0

        await db.execute(
            update(Notification)
            .where(and_(Notification.id.in_(unread_ids), Notification.user_id == actor.id))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

    for notification_id in unread_ids:
        await bus.publish_change(
            Topic.NOTIFICATIONS,
            ChangeType.UPDATE,
            {"id": str(notification_id), "user_id": str(actor.id), "read": True},
        )

    logger.info(f"Marked {len(unread_ids)} notification(s) read")
    return len(unread_ids)
