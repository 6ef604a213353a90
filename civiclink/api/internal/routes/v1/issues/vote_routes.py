# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.core.identity import Actor
from civiclink.core.realtime import FanoutBus
from civiclink.dependancies.common import get_current_actor, get_fanout_bus
from civiclink.schemas.issues import VoteStateResponse
from civiclink.services.issues import get_vote_state, toggle_vote

router = APIRouter(prefix="/issues/{issue_id}/votes", tags=["Votes"])


@router.post("/toggle", response_model=VoteStateResponse)
async def toggle_issue_vote(
    issue_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
):
    """Upvote the issue, or withdraw the upvote if one exists"""
    result = await toggle_vote(db, bus, actor, issue_id)
    return VoteStateResponse.model_validate(result)


@router.get("/me", response_model=VoteStateResponse)
async def my_vote(
    issue_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Whether the current user upvotes the issue, with the ledger count"""
    result = await get_vote_state(db, actor, issue_id)
    return VoteStateResponse.model_validate(result)
