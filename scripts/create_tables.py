#!/usr/bin/env python
"""
Script to create database tables for CivicLink without running migrations.

Handy for local SQLite databases and throwaway environments; deployments
use ``alembic upgrade head``.
"""

# Standard library imports
import asyncio
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Third-party imports
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from civiclink.core.db.create_async_engine import async_engine
from civiclink.core.monitoring.logging import get_logger
from civiclink.models import Base

logger = get_logger("scripts.create_tables")


async def create_tables() -> list[str]:
    """Create all tables in the database and return the table names found afterwards."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    await async_engine.dispose()
    return sorted(tables)


if __name__ == "__main__":
    logger.info("Creating database tables...")
    try:
        created = asyncio.run(create_tables())
    except SQLAlchemyError as e:
        logger.error(f"Error creating tables: {e}")
        sys.exit(1)

    logger.info("All tables created successfully")
    for table in created:
        logger.info(f"  - {table}")
