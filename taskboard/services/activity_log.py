from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.repos.activity import ActivityRepo
from taskboard.schemas.activity import ActivityCreate, ActivityResponse


class ActivityLog:
    """Append-only audit trail of mutating actions against a board.

    A failed write never undoes the mutation that triggered it; it is logged
    as a warning and reported to the caller as ``None`` so that no realtime
    event goes out without its entry.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def record(
        self,
        board_id: str,
        actor_id: str,
        action: str,
        *,
        task_id: str | None = None,
        list_id: str | None = None,
    ) -> ActivityResponse | None:
        session = self._session_factory()

        try:
            repo = ActivityRepo(session)
            entry = await repo.create_one(
                ActivityCreate(
                    board_id=board_id,
                    user_id=actor_id,
                    action=action,
                    task_id=task_id,
                    list_id=list_id,
                )
            )
            await session.refresh(entry, ["user"])
            return ActivityResponse.model_validate(entry)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.warning(f"Activity log write failed (board={board_id}, action={action!r}): {e}")
            return None
        finally:
            await session.close()

    async def list_for_board(self, board_id: str) -> list[ActivityResponse]:
        """Entries for a board, most recent first."""
        session = self._session_factory()

        try:
            entries = await ActivityRepo(session).get_for_board(board_id)
            return [ActivityResponse.model_validate(e) for e in entries]
        finally:
            await session.close()
