from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.activity import Activity
from taskboard.models.board import Board, BoardMember
from taskboard.models.task import Task, TaskAssignee
from taskboard.models.task_list import TaskList
from taskboard.repos.base import BaseRepository
from taskboard.schemas.board import BoardMemberCreate, BoardRecord, BoardUpdate


class BoardRepo(BaseRepository[Board, BoardRecord, BoardUpdate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Board)

    async def get_for_member(self, user_id: str) -> list[Board]:
        """Get all boards the user belongs to, newest first."""
        stmt = (
            select(Board)
            .join(BoardMember, BoardMember.board_id == Board.id)
            .where(BoardMember.user_id == user_id)
            .order_by(Board.created_at.desc(), Board.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_cascade(self, board_id: str) -> None:
        """Delete a board together with its lists, tasks, members and activity.

        Runs inside the caller's transaction; nothing is committed here.
        """
        list_ids = select(TaskList.id).where(TaskList.board_id == board_id)
        task_ids = select(Task.id).where(Task.list_id.in_(list_ids))

        await self.session.execute(delete(TaskAssignee).where(TaskAssignee.task_id.in_(task_ids)))
        await self.session.execute(delete(Task).where(Task.list_id.in_(list_ids)))
        await self.session.execute(delete(TaskList).where(TaskList.board_id == board_id))
        await self.session.execute(delete(Activity).where(Activity.board_id == board_id))
        await self.session.execute(delete(BoardMember).where(BoardMember.board_id == board_id))
        await self.session.execute(delete(Board).where(Board.id == board_id))


class BoardMemberRepo(BaseRepository[BoardMember, BoardMemberCreate, BoardMemberCreate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, BoardMember)

    async def add(self, board_id: str, user_id: str, *, auto_commit: bool = True) -> BoardMember:
        return await self.create_one(
            BoardMemberCreate(board_id=board_id, user_id=user_id),
            auto_commit=auto_commit,
        )

    async def remove(self, board_id: str, user_id: str, *, auto_commit: bool = True) -> bool:
        """Remove a membership row. Returns True if one was deleted."""
        stmt = delete(BoardMember).where(
            BoardMember.board_id == board_id,
            BoardMember.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()
        return result.rowcount > 0  # type: ignore
