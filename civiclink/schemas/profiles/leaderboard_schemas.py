# Standard library imports
from uuid import UUID

# Third-party imports
from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: UUID
    full_name: str | None
    points: int
