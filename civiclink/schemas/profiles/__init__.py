from .leaderboard_schemas import LeaderboardEntry

__all__ = ["LeaderboardEntry"]
