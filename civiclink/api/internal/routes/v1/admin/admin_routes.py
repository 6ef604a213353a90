# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.core.identity import Actor
from civiclink.core.realtime import FanoutBus
from civiclink.dependancies.common import get_current_actor, get_dispatcher, get_fanout_bus
from civiclink.schemas.issues import (
    AllowedTransitionsResponse,
    DepartmentAssignRequest,
    IssueResponse,
    IssueStats,
    StatusChangeRequest,
)
from civiclink.services.issues import assign_department, change_status, issue_stats, issue_transitions
from civiclink.services.notifications import NotificationDispatcher

router = APIRouter(prefix="/admin/issues", tags=["Admin"])


@router.get("/stats", response_model=IssueStats)
async def get_issue_stats(
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    return await issue_stats(db, actor)


@router.patch("/{issue_id}/status", response_model=IssueResponse)
async def update_issue_status(
    issue_id: UUID,
    payload: StatusChangeRequest,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Move an issue along its lifecycle (admin only)"""
    issue = await change_status(db, bus, dispatcher, actor, issue_id, payload.status, note=payload.note)
    return IssueResponse.model_validate(issue)


@router.patch("/{issue_id}/department", response_model=IssueResponse)
async def update_issue_department(
    issue_id: UUID,
    payload: DepartmentAssignRequest,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    issue = await assign_department(db, bus, dispatcher, actor, issue_id, payload.department)
    return IssueResponse.model_validate(issue)


@router.get("/{issue_id}/transitions", response_model=AllowedTransitionsResponse)
async def get_issue_transitions(
    issue_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Statuses the issue may move to next"""
    current, allowed = await issue_transitions(db, actor, issue_id)
    return AllowedTransitionsResponse(status=current, allowed=allowed)
