from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.core.config import Settings
from taskboard.services.activity_log import ActivityLog
from taskboard.services.auth_service import AuthService
from taskboard.services.board_service import BoardService
from taskboard.services.list_service import ListService
from taskboard.services.notifier import BoardNotifier
from taskboard.services.task_service import TaskService


@dataclass
class ServiceContainer:
    """Every service, wired to one session factory and one notifier."""

    auth: AuthService
    activity_log: ActivityLog
    notifier: BoardNotifier
    boards: BoardService
    lists: ListService
    tasks: TaskService

    async def close(self) -> None:
        await self.notifier.close()


def build_services(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> ServiceContainer:
    auth = AuthService(session_factory, settings)
    activity_log = ActivityLog(session_factory)
    notifier = BoardNotifier(auth, session_factory, max_pending=settings.realtime_queue_size)
    return ServiceContainer(
        auth=auth,
        activity_log=activity_log,
        notifier=notifier,
        boards=BoardService(session_factory, notifier, activity_log),
        lists=ListService(session_factory, notifier, activity_log),
        tasks=TaskService(session_factory, notifier, activity_log),
    )
