from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.task import Task, TaskAssignee
from taskboard.models.task_list import TaskList
from taskboard.repos.base import BaseRepository
from taskboard.schemas.task import TaskAssigneeCreate, TaskRecord, TaskUpdate


class TaskRepo(BaseRepository[Task, TaskRecord, TaskUpdate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Task)

    async def get_for_list(self, list_id: str) -> list[Task]:
        """Get a list's tasks in display order (order, then creation time, then id)."""
        stmt = (
            select(Task)
            .where(Task.list_id == list_id)
            .order_by(Task.order, Task.created_at, Task.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def next_order(self, list_id: str) -> int:
        """Order value that places a new task after every existing one."""
        stmt = select(func.max(Task.order)).where(Task.list_id == list_id)
        result = await self.session.execute(stmt)
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def delete_cascade(self, task_id: str) -> None:
        """Delete a task and its assignments inside the caller's transaction."""
        await self.session.execute(delete(TaskAssignee).where(TaskAssignee.task_id == task_id))
        await self.session.execute(delete(Task).where(Task.id == task_id))


class TaskAssigneeRepo(BaseRepository[TaskAssignee, TaskAssigneeCreate, TaskAssigneeCreate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TaskAssignee)

    async def is_assigned(self, task_id: str, user_id: str) -> bool:
        stmt = select(TaskAssignee.id).where(
            TaskAssignee.task_id == task_id,
            TaskAssignee.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def add(self, task_id: str, user_id: str, *, auto_commit: bool = True) -> TaskAssignee:
        return await self.create_one(
            TaskAssigneeCreate(task_id=task_id, user_id=user_id),
            auto_commit=auto_commit,
        )

    async def revoke_on_board(self, board_id: str, user_id: str) -> int:
        """Drop a user's assignments on every task of a board. Returns count removed."""
        task_ids = (
            select(Task.id)
            .join(TaskList, TaskList.id == Task.list_id)
            .where(TaskList.board_id == board_id)
        )
        stmt = delete(TaskAssignee).where(
            TaskAssignee.user_id == user_id,
            TaskAssignee.task_id.in_(task_ids),
        )
        result = await self.session.execute(stmt)
        return result.rowcount  # type: ignore
