import asyncio
from logging.config import fileConfig

from loguru import logger
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# Import settings to get dynamic database URL
from taskboard.core.config import get_settings

# Import all models so Alembic can detect them for autogenerate
from taskboard.models.activity import Activity  # noqa: F401
from taskboard.models.base import Base
from taskboard.models.board import Board, BoardMember  # noqa: F401
from taskboard.models.task import Task, TaskAssignee  # noqa: F401
from taskboard.models.task_list import TaskList  # noqa: F401
from taskboard.models.user import User  # noqa: F401

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# The application settings decide the database; alembic.ini only names a fallback
settings = get_settings()
db_url = settings.db_url
config.set_main_option("sqlalchemy.url", db_url)
logger.info(f"Running migrations against {db_url}")

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,  # Required for SQLite ALTER TABLE support
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,  # Required for SQLite ALTER TABLE support
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations in 'online' mode using async engine."""
    settings.db_directory.mkdir(parents=True, exist_ok=True)
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
