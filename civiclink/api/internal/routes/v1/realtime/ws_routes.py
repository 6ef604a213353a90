"""
Realtime websocket endpoints.

Each connection owns its bus subscriptions. Predicates are built here from
the authenticated actor or the path, never from anything the client sends
after the handshake.
"""

# Standard library imports
import asyncio
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.core.exceptions import CivicLinkError, NotFound, UpstreamUnavailable
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import FanoutBus, Subscription, Topic, field_equals
from civiclink.db_selectors.issues import get_issue_or_404
from civiclink.dependancies.common import get_fanout_bus, get_websocket_actor

router = APIRouter(prefix="/ws", tags=["Realtime"])

logger = get_contextual_logger(__name__)


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    async for event in subscription:
        await websocket.send_json(event.model_dump(mode="json"))


async def _watch_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def pump(websocket: WebSocket, subscriptions: list[Subscription]) -> None:
    """Stream events from ``subscriptions`` until the client leaves or the bus fails."""
    watcher = asyncio.create_task(_watch_disconnect(websocket))
    tasks = [asyncio.create_task(_forward(websocket, subscription)) for subscription in subscriptions]
    tasks.append(watcher)
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        for task in done:
            exc = task.exception()
            if isinstance(exc, UpstreamUnavailable):
                logger.warning(f"Realtime stream lost: {exc.message}")
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
                break
            elif exc is not None and not isinstance(exc, WebSocketDisconnect):
                raise exc
            elif exc is None and task is not watcher:
                # Subscription ended because the bus shut down
                await websocket.close(code=status.WS_1001_GOING_AWAY)
                break
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        for subscription in subscriptions:
            await subscription.close()


@router.websocket("/notifications")
async def notifications_stream(websocket: WebSocket, bus: FanoutBus = Depends(get_fanout_bus)):
    """Push the authenticated user's own notification rows as they change."""
    try:
        actor = get_websocket_actor(websocket)
    except CivicLinkError as e:
        logger.info(f"Rejected notifications websocket: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    subscription = await bus.subscribe(Topic.NOTIFICATIONS, field_equals("user_id", actor.id))
    await websocket.accept()
    logger.bind(user_id=actor.id).debug("Notifications websocket connected")
    await pump(websocket, [subscription])


@router.websocket("/issues/{issue_id}")
async def issue_stream(
    websocket: WebSocket,
    issue_id: UUID,
    bus: FanoutBus = Depends(get_fanout_bus),
    db: AsyncSession = Depends(get_async_session),
):
    """Public feed of one issue: its row, its votes and its comments."""
    try:
        await get_issue_or_404(db, issue_id)
    except NotFound:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        # The stream is long-lived; do not hold a connection for it
        await db.close()

    subscriptions = [
        await bus.subscribe(Topic.ISSUES, field_equals("id", issue_id)),
        await bus.subscribe(Topic.VOTES, field_equals("issue_id", issue_id)),
        await bus.subscribe(Topic.COMMENTS, field_equals("issue_id", issue_id)),
    ]
    await websocket.accept()
    await pump(websocket, subscriptions)
