# Local application imports
from civiclink.services.rewards.points_services import award_points, award_points_best_effort, leaderboard

__all__ = ["award_points", "award_points_best_effort", "leaderboard"]
