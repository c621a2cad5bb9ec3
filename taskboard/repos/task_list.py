from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.task import Task, TaskAssignee
from taskboard.models.task_list import TaskList
from taskboard.repos.base import BaseRepository
from taskboard.schemas.task_list import ListRecord, ListUpdate


class TaskListRepo(BaseRepository[TaskList, ListRecord, ListUpdate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TaskList)

    async def get_for_board(self, board_id: str) -> list[TaskList]:
        """Get a board's lists in display order.

        Duplicate ``order`` values fall back to creation time, then id.
        """
        stmt = (
            select(TaskList)
            .where(TaskList.board_id == board_id)
            .order_by(TaskList.order, TaskList.created_at, TaskList.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def next_order(self, board_id: str) -> int:
        """Order value that places a new list after every existing one."""
        stmt = select(func.max(TaskList.order)).where(TaskList.board_id == board_id)
        result = await self.session.execute(stmt)
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def delete_cascade(self, list_id: str) -> None:
        """Delete a list and its tasks inside the caller's transaction."""
        task_ids = select(Task.id).where(Task.list_id == list_id)
        await self.session.execute(delete(TaskAssignee).where(TaskAssignee.task_id.in_(task_ids)))
        await self.session.execute(delete(Task).where(Task.list_id == list_id))
        await self.session.execute(delete(TaskList).where(TaskList.id == list_id))
