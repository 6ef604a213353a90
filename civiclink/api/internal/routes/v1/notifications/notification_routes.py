# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.core.identity import Actor
from civiclink.core.realtime import FanoutBus
from civiclink.dependancies.common import get_current_actor, get_fanout_bus
from civiclink.schemas.notifications import MarkAllReadResponse, NotificationResponse, UnreadCountResponse
from civiclink.services.notifications import list_notifications, mark_all_read, mark_read, unread_count
from civiclink.settings import settings

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationResponse])
async def get_notifications(
    limit: int = Query(settings.NOTIFICATIONS_PAGE_SIZE, ge=1, le=100),
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """The current user's most recent notifications, newest first"""
    notifications = await list_notifications(db, actor, limit=limit)
    return [NotificationResponse.model_validate(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    return UnreadCountResponse(unread=await unread_count(db, actor))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def read_all_notifications(
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
):
    return MarkAllReadResponse(updated=await mark_all_read(db, bus, actor))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def read_notification(
    notification_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
):
    notification = await mark_read(db, bus, actor, notification_id)
    return NotificationResponse.model_validate(notification)
