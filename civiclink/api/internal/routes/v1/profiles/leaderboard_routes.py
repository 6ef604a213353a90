# Third-party imports
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civiclink.core.db import get_async_session
from civiclink.schemas.profiles import LeaderboardEntry
from civiclink.services.rewards import leaderboard
from civiclink.settings import settings

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(settings.LEADERBOARD_SIZE, ge=1, le=settings.LEADERBOARD_SIZE),
    db: AsyncSession = Depends(get_async_session),
):
    """Top contributors by points"""
    return await leaderboard(db, limit)
