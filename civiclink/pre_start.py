"""
Pre-start script to check database connectivity and other services.
"""

# Standard library imports
import asyncio
import sys

# Third-party imports
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from civiclink.core.db.create_async_engine import create_async_engine
from civiclink.core.monitoring.logging import get_logger
from civiclink.settings import settings

logger = get_logger("civiclink.pre_start")


async def check_database() -> bool:
    """Check if database is accessible and ready."""
    engine = create_async_engine()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database is ready")
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        return False
    finally:
        await engine.dispose()


async def check_redis() -> bool:
    """Check the realtime fan-out transport when it is Redis."""
    if settings.FANOUT_BACKEND != "redis":
        return True

    # Local application imports
    from civiclink.core.caching.redis import redis_client

    try:
        await redis_client.ping()
        logger.info("Redis is ready")
        return True
    except (RedisError, OSError) as e:
        logger.error(f"Redis connection failed: {e}")
        return False
    finally:
        await redis_client.aclose()


async def wait_for(check, name: str, max_retries: int = 30, retry_interval: int = 2) -> bool:
    """
    Retry ``check`` until it succeeds.

    Args:
        check: Coroutine function returning True when the service is ready
        name: Service name for log messages
        max_retries: Maximum number of connection attempts
        retry_interval: Seconds between retries

    Returns:
        True if the service is ready, False otherwise
    """
    logger.info(f"Waiting for {name} to be ready...")

    for attempt in range(1, max_retries + 1):
        logger.info(f"{name} connection attempt {attempt}/{max_retries}")

        if await check():
            return True

        if attempt < max_retries:
            logger.info(f"Retrying in {retry_interval} seconds...")
            await asyncio.sleep(retry_interval)

    logger.error(f"Failed to connect to {name} after {max_retries} attempts")
    return False


async def main() -> None:
    """Main pre-start routine."""
    logger.info("Starting pre-start checks...")

    if not await wait_for(check_database, "database"):
        logger.error("Pre-start checks failed: Database is not available")
        sys.exit(1)

    if not await wait_for(check_redis, "redis"):
        logger.error("Pre-start checks failed: Redis is not available")
        sys.exit(1)

    logger.info("All pre-start checks passed")


if __name__ == "__main__":
    asyncio.run(main())
