# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.models.profiles.profile import Profile


async def get_profile_by_id(db: AsyncSession, user_id: UUID) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.id == user_id))
    return result.scalar_one_or_none()


async def top_profiles(db: AsyncSession, limit: int) -> list[Profile]:
    result = await db.execute(select(Profile).order_by(Profile.points.desc(), Profile.created_at).limit(limit))
    return list(result.scalars().all())
