from .comment_routes import router as comment_router
from .issue_routes import router as issue_router
from .vote_routes import router as vote_router

__all__ = ["comment_router", "issue_router", "vote_router"]
