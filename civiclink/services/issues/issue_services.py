# Standard library imports
from uuid import UUID

# Third-party imports
from kombu.exceptions import OperationalError as BrokerError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.exceptions import ValidationFailed
from civiclink.core.identity import Actor, require_actor
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.monitoring.sentry import capture_exception
from civiclink.core.realtime import ChangeType, FanoutBus, Topic, to_record
from civiclink.db_selectors import issues as issue_selectors
from civiclink.models.issues.issue import Issue, IssueCategory, IssueStatus
from civiclink.schemas.issues import IssueCreate, IssueSortField
from civiclink.services.issues.vote_ledger import reconcile_issue_counts
from civiclink.services.rewards.points_services import award_points_best_effort
from civiclink.settings import settings


def _check_length(field: str, value: str, min_length: int, max_length: int) -> str:
    value = (value or "").strip()
    if not min_length <= len(value) <= max_length:
        raise ValidationFailed(
            f"{field.capitalize()} must be between {min_length} and {max_length} characters",
            details={"field": field, "length": len(value)},
        )
    return value


def validate_issue_payload(payload: IssueCreate) -> tuple[str, str]:
    title = _check_length("title", payload.title, settings.ISSUE_TITLE_MIN_LENGTH, settings.ISSUE_TITLE_MAX_LENGTH)
    description = _check_length(
        "description",
        payload.description,
        settings.ISSUE_DESCRIPTION_MIN_LENGTH,
        settings.ISSUE_DESCRIPTION_MAX_LENGTH,
    )
    return title, description


def schedule_department_classification(issue_id: UUID) -> bool:
    """Queue AI department classification; a broker outage never fails the report."""
    # Local application imports
    from civiclink.tasks.issue_tasks import classify_issue_department_task

    try:
        classify_issue_department_task.delay(str(issue_id))
    except (BrokerError, OSError) as e:
        get_contextual_logger(__name__, issue_id=issue_id).exception("Could not queue department classification")
        capture_exception(e)
        return False
    return True


async def report_issue(db: AsyncSession, bus: FanoutBus, actor: Actor | None, payload: IssueCreate) -> Issue:
    """
    Create a ``pending`` issue for the actor.

    The reporter's points award runs after the issue is committed and is
    allowed to fail: the issue stands either way.

    Raises:
        Unauthorized: no actor.
        ValidationFailed: title or description out of bounds; nothing is stored.
    """
    actor = require_actor(actor)
    title, description = validate_issue_payload(payload)
    logger = get_contextual_logger(__name__, user_id=actor.id)

    with translate_store_errors("report issue"):
        issue = Issue(
            title=title,
            description=description,
            category=payload.category,
            address=payload.address,
            latitude=payload.latitude,
            longitude=payload.longitude,
            photo_url=payload.photo_url,
            department=(payload.department or "").strip() or None,
            reporter_id=actor.id,
            status=IssueStatus.PENDING,
            upvotes=0,
        )
        db.add(issue)
        await db.commit()
        await db.refresh(issue)

    logger.bind(issue_id=issue.id).info("Issue reported")

    await award_points_best_effort(db, actor.id, settings.REPORT_ISSUE_POINTS)
    await bus.publish_change(Topic.ISSUES, ChangeType.INSERT, to_record(issue))

    if settings.CLASSIFY_DEPARTMENT_ON_REPORT and not issue.department:
        schedule_department_classification(issue.id)
    return issue


async def get_issue(db: AsyncSession, issue_id: UUID) -> Issue:
    with translate_store_errors("get issue"):
        issue = await issue_selectors.get_issue_or_404(db, issue_id)
    await reconcile_issue_counts(db, [issue])
    return issue


async def list_issues(
    db: AsyncSession,
    *,
    category: IssueCategory | None = None,
    status: IssueStatus | None = None,
    reporter_id: UUID | None = None,
    sort_by: IssueSortField = IssueSortField.CREATED_AT,
    descending: bool = True,
    page: int = 1,
    per_page: int | None = None,
) -> tuple[list[Issue], int]:
    per_page = min(per_page or settings.ISSUES_DEFAULT_PAGE_SIZE, settings.ISSUES_MAX_PAGE_SIZE)
    page = max(page, 1)

    with translate_store_errors("list issues"):
        issues, total = await issue_selectors.list_issues(
            db,
            category=category,
            status=status,
            reporter_id=reporter_id,
            sort_by=sort_by.value,
            descending=descending,
            offset=(page - 1) * per_page,
            limit=per_page,
        )
    await reconcile_issue_counts(db, issues)
    return issues, total
