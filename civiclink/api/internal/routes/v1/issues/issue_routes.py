# Standard library imports
from typing import Literal
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.core.identity import Actor, require_actor
from civiclink.core.realtime import FanoutBus
from civiclink.dependancies.common import get_current_actor, get_fanout_bus, get_image_verifier
from civiclink.models.issues.issue import IssueCategory, IssueStatus
from civiclink.schemas.issues import (
    ImageVerificationRequest,
    ImageVerificationResponse,
    IssueCreate,
    IssueListResponse,
    IssueResponse,
    IssueSortField,
)
from civiclink.services.ai import ImageVerifier
from civiclink.services.issues import get_issue as get_issue_service
from civiclink.services.issues import list_issues as list_issues_service
from civiclink.services.issues import report_issue
from civiclink.settings import settings

router = APIRouter(prefix="/issues", tags=["Issues"])


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(
    issue_data: IssueCreate,
    actor: Actor | None = Depends(get_current_actor),
    db: AsyncSession = Depends(get_async_session),
    bus: FanoutBus = Depends(get_fanout_bus),
):
    """Report a new issue; it starts out pending."""
    issue = await report_issue(db, bus, actor, issue_data)
    return IssueResponse.model_validate(issue)


@router.get("", response_model=IssueListResponse)
async def list_issues(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.ISSUES_DEFAULT_PAGE_SIZE, ge=1, le=settings.ISSUES_MAX_PAGE_SIZE),
    category: IssueCategory | None = None,
    status: IssueStatus | None = None,
    reporter_id: UUID | None = None,
    sort_by: IssueSortField = IssueSortField.CREATED_AT,
    order: Literal["asc", "desc"] = "desc",
    db: AsyncSession = Depends(get_async_session),
):
    """List issues with filters"""
    issues, total = await list_issues_service(
        db,
        category=category,
        status=status,
        reporter_id=reporter_id,
        sort_by=sort_by,
        descending=order == "desc",
        page=page,
        per_page=per_page,
    )
    return IssueListResponse(
        issues=[IssueResponse.model_validate(issue) for issue in issues],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.post("/verify-image", response_model=ImageVerificationResponse)
async def verify_image(
    request: ImageVerificationRequest,
    actor: Actor | None = Depends(get_current_actor),
    verifier: ImageVerifier = Depends(get_image_verifier),
):
    """Check that a photo shows the problem being reported. A skipped check never blocks a report."""
    require_actor(actor)
    verdict = await verifier.verify(
        request.image_base64,
        request.title,
        request.description,
        request.category.value,
    )
    if verdict is None:
        return ImageVerificationResponse(skipped=True)
    return ImageVerificationResponse(skipped=False, verdict=verdict.verdict, explanation=verdict.explanation)


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    """Get issue details"""
    issue = await get_issue_service(db, issue_id)
    return IssueResponse.model_validate(issue)
