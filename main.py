# Standard library imports
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Third-party imports
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from civiclink.api import router as api_router
from civiclink.api.internal.utils.exceptions import register_exception_handlers
from civiclink.core.db import AsyncSessionLocal
from civiclink.core.monitoring.logging import get_logger
from civiclink.core.monitoring.sentry import setup_sentry
from civiclink.core.realtime import FanoutBus, build_fanout_bus
from civiclink.settings import settings

# Set up the main application logger
logger = get_logger("civiclink")


# ---- FASTAPI APP CREATION ----
def custom_generate_unique_id(route: APIRoute) -> str:
    # Handle routes without tags
    if route.tags and len(route.tags) > 0:
        return f"{route.tags[0]}-{route.name}"
    else:
        return route.name or "unnamed_route"


def create_app(fanout_bus: FanoutBus | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    ``fanout_bus`` overrides the configured realtime backend; the app closes
    whichever bus it ends up with on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Startup
        logger.info(f"Starting up {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
        if setup_sentry(extra_integrations=[FastApiIntegration()]):
            logger.info("Sentry monitoring enabled")

        app.state.fanout_bus = fanout_bus or build_fanout_bus()
        logger.info(f"Realtime fan-out backend: {type(app.state.fanout_bus).__name__}")

        yield

        # Shutdown
        logger.info("Shutting down")
        await app.state.fanout_bus.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Civic issue reporting: votes, lifecycle and realtime notifications",
        openapi_url=f"{settings.API_V1_STR}/openapi.json" if settings.ENVIRONMENT != "production" else None,
        docs_url=f"{settings.API_V1_STR}/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url=f"{settings.API_V1_STR}/redoc" if settings.ENVIRONMENT != "production" else None,
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    async def health_check(request: Request):
        database = "connected"
        try:
            async with AsyncSessionLocal() as db:
                await db.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Health check could not reach the database: {e}")
            database = "unavailable"
        return {
            "status": "healthy" if database == "connected" else "degraded",
            "version": "1.0.0",
            "database": database,
            "fanout": type(request.app.state.fanout_bus).__name__,
        }

    app.include_router(api_router)

    return app


# Create the app instance
app = create_app()
