# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.exceptions import CivicLinkError
from civiclink.core.monitoring.logging import get_contextual_logger
from civiclink.core.monitoring.sentry import capture_exception
from civiclink.db_selectors.profiles import get_profile_by_id, top_profiles
from civiclink.models.profiles.profile import Profile
from civiclink.schemas.profiles import LeaderboardEntry


async def _increment_points(db: AsyncSession, user_id: UUID, points: int) -> bool:
    result = await db.execute(
        update(Profile)
        .where(Profile.id == user_id)
        .values(points=Profile.points + points)
        .execution_options(synchronize_session=False)
    )
    return bool(result.rowcount)


async def award_points(db: AsyncSession, user_id: UUID, points: int) -> int:
    """
    Credit ``points`` to a user, creating their profile on first award.

    The increment is a single SQL expression so concurrent awards add up.

    Returns:
        The user's new total.
    """
    with translate_store_errors("award points"):
        if not await _increment_points(db, user_id, points):
            db.add(Profile(id=user_id, points=points))
            try:
                await db.commit()
            except IntegrityError:
                # Profile created concurrently; fall back to the increment
                await db.rollback()
                await _increment_points(db, user_id, points)
                await db.commit()
        else:
            await db.commit()

        profile = await get_profile_by_id(db, user_id)
        if profile is not None:
            await db.refresh(profile)
        return profile.points if profile else points


async def award_points_best_effort(db: AsyncSession, user_id: UUID, points: int) -> bool:
    """
    Award points without letting a failure reach the caller.

    Used after a report is already committed: the issue stands even when the
    award does not. The award runs in its own session on the same engine, so
    a failed award never rolls back or expires the caller's objects.
    """
    logger = get_contextual_logger(__name__, user_id=user_id)
    try:
        async with AsyncSession(bind=db.bind, expire_on_commit=False) as award_db:
            total = await award_points(award_db, user_id, points)
    except (CivicLinkError, SQLAlchemyError) as e:
        logger.exception(f"Failed to award {points} points")
        capture_exception(e)
        return False

    logger.info(f"Awarded {points} points, total now {total}")
    return True


async def leaderboard(db: AsyncSession, limit: int) -> list[LeaderboardEntry]:
    with translate_store_errors("leaderboard"):
        profiles = await top_profiles(db, limit)
    return [
        LeaderboardEntry(rank=index, user_id=profile.id, full_name=profile.full_name, points=profile.points)
        for index, profile in enumerate(profiles, start=1)
    ]
