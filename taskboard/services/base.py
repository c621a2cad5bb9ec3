from collections.abc import Iterable
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.core.constants import BoardOperation, EventType
from taskboard.core.exceptions.domain import ResourceNotFoundError
from taskboard.models.board import Board
from taskboard.repos.board import BoardRepo
from taskboard.schemas.activity import ActivityResponse
from taskboard.schemas.user import UserResponse
from taskboard.services.access_policy import authorize
from taskboard.services.activity_log import ActivityLog
from taskboard.services.notifier import BoardNotifier


class BoardScopedService:
    """Shared plumbing for services that mutate a board and announce it."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: BoardNotifier,
        activity_log: ActivityLog,
    ):
        self._session_factory = session_factory
        self._notifier = notifier
        self._activity_log = activity_log

    async def _get_board(
        self,
        session: AsyncSession,
        actor: UserResponse,
        board_id: str,
        operation: BoardOperation,
        *,
        target_user_id: str | None = None,
    ) -> Board:
        """Load a board and check the actor may perform ``operation`` on it."""
        board = await BoardRepo(session).get_by_id(board_id, fresh=True)
        if not board:
            raise ResourceNotFoundError("Board", board_id)
        authorize(actor.id, board, operation, target_user_id=target_user_id)
        return board

    async def _announce(
        self,
        board_id: str,
        actor: UserResponse,
        action: str,
        *,
        task_id: str | None = None,
        list_id: str | None = None,
        events: Iterable[tuple[EventType, dict[str, Any]]] = (),
    ) -> ActivityResponse | None:
        """Record an activity entry, then broadcast the mutation's events.

        Nothing is broadcast when the entry could not be written.
        """
        activity = await self._activity_log.record(
            board_id, actor.id, action, task_id=task_id, list_id=list_id
        )
        if activity is None:
            logger.warning(f"Realtime events withheld for board {board_id}: no activity entry")
            return None

        for event_type, data in events:
            self._notifier.publish(board_id, event_type, data)
        self._notifier.publish(
            board_id,
            EventType.ACTIVITY_ADDED,
            activity.model_dump(mode="json", by_alias=True),
        )
        return activity
