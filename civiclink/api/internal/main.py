# Third-party imports
from fastapi import APIRouter

# Local application imports
from civiclink.api.internal.routes.v1.realtime import ws_router
from civiclink.api.internal.routes.v1.routes import router as v1_router
from civiclink.settings import settings

router = APIRouter()
# Include internal API routers
router.include_router(v1_router, prefix=settings.API_V1_STR)
# Websockets live outside the versioned prefix
router.include_router(ws_router)
