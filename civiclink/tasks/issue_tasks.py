# Standard library imports
from typing import Any
from uuid import UUID

# Third-party imports
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.celery.celery import celery_app
from civiclink.core.db import async_engine, run_with_new_session
from civiclink.core.exceptions import UpstreamUnavailable
from civiclink.core.identity import Actor
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.realtime import FanoutBus, build_fanout_bus
from civiclink.db_selectors.issues import get_issue_by_id
from civiclink.services.ai import DepartmentClassifier
from civiclink.services.issues.lifecycle import assign_department
from civiclink.services.issues.vote_ledger import reconcile_all_vote_counts
from civiclink.services.notifications.dispatcher import NotificationDispatcher
from civiclink.utils.celery_utils import celery_async_task


async def classify_issue_department(
    db: AsyncSession,
    bus: FanoutBus,
    issue_id: UUID,
    classifier: DepartmentClassifier | None = None,
) -> str | None:
    """
    Ask the classifier for a department and assign it as the system actor.

    Issues that already have a department (set by an administrator) are left
    alone. Returns the department applied, or None when nothing changed.
    """
    logger = get_contextual_logger(__name__, issue_id=issue_id)

    issue = await get_issue_by_id(db, issue_id)
    if issue is None:
        logger.warning("Issue vanished before classification")
        return None
    if issue.department:
        logger.info(f"Issue already assigned to {issue.department}, skipping classification")
        return None

    classifier = classifier or DepartmentClassifier()
    department = await classifier.classify(issue.title, issue.description, issue.category.value)
    await assign_department(db, bus, NotificationDispatcher(bus), Actor.system(), issue.id, department)
    return department


@celery_app.task(bind=True, autoretry_for=(UpstreamUnavailable,), retry_backoff=True, max_retries=3)
@celery_async_task
async def classify_issue_department_task(self: Any, issue_id: str) -> str | None:  # noqa: ARG001
    bus = build_fanout_bus(dedicated_client=True)
    try:
        return await run_with_new_session(classify_issue_department, bus, UUID(issue_id))
    finally:
        await bus.close()
        # Pooled connections belong to this task's event loop
        await async_engine.dispose()


@celery_app.task(bind=True)
@celery_async_task
async def reconcile_vote_counts_task(self: Any) -> int:  # noqa: ARG001
    logger = get_contextual_logger(__name__)
    try:
        fixed = await run_with_new_session(reconcile_all_vote_counts)
    finally:
        await async_engine.dispose()
    logger.info(f"Reconciled {fixed} stale vote counter(s)")
    return fixed
