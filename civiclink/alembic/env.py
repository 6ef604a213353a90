# Standard library imports
import asyncio
from logging.config import fileConfig
from pathlib import Path
import re

# Third-party imports
from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

# Local application imports
from civiclink.models import *  # noqa
from civiclink.models.base import Base
from civiclink.settings import settings

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    return settings.SQLALCHEMY_ASYNC_DATABASE_URI


def get_next_sequence_number() -> str:
    """
    Determine the next sequence number for migration files.

    Returns:
        str: The next sequence number formatted as 4 digits (e.g., "0002")
    """
    script_location = config.get_main_option("script_location")
    if not script_location:
        return "0001"

    versions_dir = Path(script_location) / "versions"
    if not versions_dir.exists():
        return "0001"

    sequence_numbers = []
    for filepath in versions_dir.glob("*.py"):
        match = re.match(r"^(\d{4})_", filepath.name)
        if match:
            sequence_numbers.append(int(match.group(1)))

    return f"{max(sequence_numbers, default=0) + 1:04d}"


def process_revision_directives(context, revision, directives):
    """Prefix autogenerated revision ids with a sequence number."""
    if directives:
        sequence_num = get_next_sequence_number()
        for directive in directives:
            directive.rev_id = f"{sequence_num}_{directive.rev_id}"


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=True,
        process_revision_directives=process_revision_directives,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,
        process_revision_directives=process_revision_directives,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode through the async driver."""
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()
    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
