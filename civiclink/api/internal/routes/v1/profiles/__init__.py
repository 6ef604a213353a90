from .leaderboard_routes import router as leaderboard_router

__all__ = ["leaderboard_router"]
