# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.core.identity import Actor
from civiclink.core.realtime import FanoutBus
from civiclink.dependancies.common import get_current_actor, get_dispatcher, get_fanout_bus
from civiclink.schemas.issues import CommentCreate, CommentResponse, CommentUpdate
from civiclink.services.issues import delete_comment, edit_comment, list_comments, post_comment
from civiclink.services.notifications import NotificationDispatcher

router = APIRouter(tags=["Comments"])


@router.get("/issues/{issue_id}/comments", response_model=list[CommentResponse])
async def get_issue_comments(
    issue_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    comments = await list_comments(db, issue_id)
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.post("/issues/{issue_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    issue_id: UUID,
    payload: CommentCreate,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    comment = await post_comment(db, bus, dispatcher, actor, issue_id, payload.comment)
    return CommentResponse.model_validate(comment)


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: UUID,
    payload: CommentUpdate,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
):
    comment = await edit_comment(db, bus, actor, comment_id, payload.comment)
    return CommentResponse.model_validate(comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
):
    await delete_comment(db, bus, actor, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
