# Third-party imports
from fastapi import APIRouter

# Local application imports
from civiclink.api.internal.routes.v1.admin import admin_router
from civiclink.api.internal.routes.v1.issues import comment_router, issue_router, vote_router
from civiclink.api.internal.routes.v1.notifications import notification_router
from civiclink.api.internal.routes.v1.profiles import leaderboard_router

router = APIRouter()

# Include all internal v1 routers
router.include_router(issue_router)
router.include_router(vote_router)
router.include_router(comment_router)
router.include_router(admin_router)
router.include_router(notification_router)
router.include_router(leaderboard_router)
