from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from taskboard.core.config import Settings


def create_engine(settings: Settings, **kwargs) -> AsyncEngine:
    """Build the async engine for the configured database."""
    url = make_url(settings.db_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite and url.database and url.database != ":memory:":
        settings.db_directory.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        **kwargs,
    )

    if is_sqlite:
        # SQLite ignores foreign keys unless enabled per connection
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Ensure all tables exist."""
    from taskboard.models.activity import Activity  # noqa: F401
    from taskboard.models.base import Base
    from taskboard.models.board import Board, BoardMember  # noqa: F401
    from taskboard.models.task import Task, TaskAssignee  # noqa: F401
    from taskboard.models.task_list import TaskList  # noqa: F401
    from taskboard.models.user import User  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
