# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.exceptions import NotFound
from civiclink.models.issues.issue import Issue, IssueCategory, IssueStatus
from civiclink.models.issues.vote import Vote


async def get_issue_by_id(db: AsyncSession, issue_id: UUID) -> Issue | None:
    # populate_existing: a long-lived session must not serve a stale status or counter
    result = await db.execute(select(Issue).where(Issue.id == issue_id).execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def get_issue_or_404(db: AsyncSession, issue_id: UUID) -> Issue:
    issue = await get_issue_by_id(db, issue_id)
    if issue is None:
        raise NotFound("Issue not found")
    return issue


async def get_vote(db: AsyncSession, issue_id: UUID, user_id: UUID) -> Vote | None:
    result = await db.execute(select(Vote).where(and_(Vote.issue_id == issue_id, Vote.user_id == user_id)))
    return result.scalar_one_or_none()


async def count_votes_for_issue(db: AsyncSession, issue_id: UUID) -> int:
    """Ledger cardinality: the authoritative vote count for an issue."""
    result = await db.execute(select(func.count()).select_from(Vote).where(Vote.issue_id == issue_id))
    return int(result.scalar_one())


async def count_votes_for_issues(db: AsyncSession, issue_ids: list[UUID]) -> dict[UUID, int]:
    if not issue_ids:
        return {}
    result = await db.execute(
        select(Vote.issue_id, func.count()).where(Vote.issue_id.in_(issue_ids)).group_by(Vote.issue_id)
    )
    counts = {issue_id: int(count) for issue_id, count in result.all()}
    return {issue_id: counts.get(issue_id, 0) for issue_id in issue_ids}


async def list_issues(
    db: AsyncSession,
    *,
    category: IssueCategory | None = None,
    status: IssueStatus | None = None,
    reporter_id: UUID | None = None,
    sort_by: str = "created_at",
    descending: bool = True,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Issue], int]:
    filters = []
    if category:
        filters.append(Issue.category == category)
    if status:
        filters.append(Issue.status == status)
    if reporter_id:
        filters.append(Issue.reporter_id == reporter_id)

    query = select(Issue)
    count_query = select(func.count()).select_from(Issue)
    if filters:
        query = query.where(and_(*filters))
        count_query = count_query.where(and_(*filters))

    sort_column = Issue.upvotes if sort_by == "upvotes" else Issue.created_at
    order_by = sort_column.desc() if descending else sort_column.asc()
    query = query.order_by(order_by, Issue.id).offset(offset).limit(limit)

    total = (await db.execute(count_query)).scalar_one()
    issues = (await db.execute(query)).scalars().all()
    return list(issues), int(total)


async def count_issues_by_status(db: AsyncSession) -> dict[IssueStatus, int]:
    result = await db.execute(select(Issue.status, func.count()).group_by(Issue.status))
    return {IssueStatus(status): int(count) for status, count in result.all()}
