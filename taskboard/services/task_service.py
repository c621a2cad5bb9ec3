from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.constants import BoardOperation, EventType
from taskboard.core.exceptions.domain import ResourceNotFoundError, ValidationError
from taskboard.models.board import Board
from taskboard.models.task import Task
from taskboard.models.task_list import TaskList
from taskboard.repos.task import TaskAssigneeRepo, TaskRepo
from taskboard.repos.task_list import TaskListRepo
from taskboard.repos.user import UserRepo
from taskboard.schemas.task import TaskCreate, TaskRecord, TaskResponse, TaskUpdate
from taskboard.schemas.user import UserResponse
from taskboard.services.base import BoardScopedService


class TaskService(BoardScopedService):
    """Tasks within lists: creation, edits, cross-list moves and assignment."""

    async def _get_list(
        self,
        session: AsyncSession,
        actor: UserResponse,
        list_id: str,
        operation: BoardOperation = BoardOperation.EDIT_CONTENT,
    ) -> tuple[TaskList, Board]:
        task_list = await TaskListRepo(session).get_by_id(list_id)
        if not task_list:
            raise ResourceNotFoundError("List", list_id)
        board = await self._get_board(session, actor, task_list.board_id, operation)
        return task_list, board

    async def _get_task(
        self,
        session: AsyncSession,
        actor: UserResponse,
        task_id: str,
        operation: BoardOperation = BoardOperation.EDIT_CONTENT,
    ) -> tuple[Task, TaskList, Board]:
        task = await TaskRepo(session).get_by_id(task_id)
        if not task:
            raise ResourceNotFoundError("Task", task_id)
        task_list, board = await self._get_list(session, actor, task.list_id, operation)
        return task, task_list, board

    async def create_task(self, actor: UserResponse, data: TaskCreate) -> TaskResponse:
        """Create a task in a list. The creator is assigned to it."""
        session = self._session_factory()

        try:
            task_list, board = await self._get_list(session, actor, data.list_id)
            task_repo = TaskRepo(session)
            order = data.order if data.order is not None else await task_repo.next_order(task_list.id)

            task = await task_repo.create_one(
                TaskRecord(
                    title=data.title,
                    description=data.description,
                    list_id=task_list.id,
                    order=order,
                ),
                auto_commit=False,
            )
            await TaskAssigneeRepo(session).add(task.id, actor.id, auto_commit=False)
            await session.commit()

            task = await task_repo.get_by_id(task.id, fresh=True)
            response = TaskResponse.model_validate(task)
            board_id = board.id
        finally:
            await session.close()

        logger.info(f"Task created: {response.id} in list {response.list_id}")
        await self._announce(
            board_id,
            actor,
            f'{actor.name} created the task "{response.title}".',
            task_id=response.id,
            events=[(EventType.TASK_CREATED, response.model_dump(mode="json", by_alias=True))],
        )
        return response

    async def list_tasks(self, actor: UserResponse, list_id: str) -> list[TaskResponse]:
        """A list's tasks in display order, with assignees."""
        session = self._session_factory()

        try:
            await self._get_list(session, actor, list_id, BoardOperation.READ)
            tasks = await TaskRepo(session).get_for_list(list_id)
            return [TaskResponse.model_validate(t) for t in tasks]
        finally:
            await session.close()

    async def get_task(self, actor: UserResponse, task_id: str) -> TaskResponse:
        session = self._session_factory()

        try:
            task, _, _ = await self._get_task(session, actor, task_id, BoardOperation.READ)
            return TaskResponse.model_validate(task)
        finally:
            await session.close()

    async def update_task(
        self, actor: UserResponse, task_id: str, data: TaskUpdate
    ) -> TaskResponse:
        """Apply a partial edit in a single transaction.

        Setting ``list_id`` moves the task; ``list_id`` and ``order`` change in
        the same write, so the task is never outside both lists. A move
        without an explicit order appends to the target list.

        Raises:
            ResourceNotFoundError: If the task or target list does not exist.
            ValidationError: If nothing is given, or the target list is on another board.
        """
        if all(value is None for value in data.model_dump().values()):
            raise ValidationError("Nothing to update")

        session = self._session_factory()

        try:
            task, source_list, board = await self._get_task(session, actor, task_id)
            task_repo = TaskRepo(session)
            old_title, old_order = task.title, task.order
            old_description = task.description
            target_list = source_list

            if data.list_id is not None and data.list_id != source_list.id:
                target_list = await TaskListRepo(session).get_by_id(data.list_id)
                if not target_list:
                    raise ResourceNotFoundError("List", data.list_id)
                if target_list.board_id != board.id:
                    raise ValidationError("Tasks can only move between lists of the same board")

            moved = target_list.id != source_list.id
            if data.order is not None:
                new_order = data.order
            elif moved:
                new_order = await task_repo.next_order(target_list.id)
            else:
                new_order = task.order

            await task_repo.update_by_id(
                task_id,
                TaskUpdate(
                    title=data.title,
                    description=data.description,
                    list_id=target_list.id,
                    order=new_order,
                ),
            )

            task = await task_repo.get_by_id(task_id, fresh=True)
            response = TaskResponse.model_validate(task)
            board_id = board.id
            source_title, target_title = source_list.title, target_list.title
        finally:
            await session.close()

        renamed = response.title != old_title
        if moved:
            placement = f'from "{source_title}" to "{target_title}"'
        elif response.order != old_order:
            placement = f"to position {response.order}"
        else:
            placement = None

        if renamed and placement:
            action = (
                f'{actor.name} renamed task "{old_title}" to "{response.title}" '
                f"and moved it {placement}"
            )
        elif renamed:
            action = f'{actor.name} renamed task "{old_title}" to "{response.title}"'
        elif placement:
            action = f'{actor.name} moved task "{response.title}" {placement}'
        elif response.description != old_description:
            action = f'{actor.name} updated the task "{response.title}"'
        else:
            return response

        await self._announce(board_id, actor, action, task_id=response.id)
        return response

    async def move_task(
        self,
        actor: UserResponse,
        task_id: str,
        target_list_id: str,
        order: int | None = None,
    ) -> TaskResponse:
        """Move a task to another list (or position) atomically."""
        return await self.update_task(actor, task_id, TaskUpdate(list_id=target_list_id, order=order))

    async def reorder_task(self, actor: UserResponse, task_id: str, order: int) -> TaskResponse:
        return await self.update_task(actor, task_id, TaskUpdate(order=order))

    async def delete_task(self, actor: UserResponse, task_id: str) -> None:
        session = self._session_factory()

        try:
            task, _, board = await self._get_task(session, actor, task_id)
            title, board_id = task.title, board.id
            await TaskRepo(session).delete_cascade(task_id)
            await session.commit()
        finally:
            await session.close()

        logger.info(f"Task deleted: {task_id} on board {board_id}")
        await self._announce(board_id, actor, f'{actor.name} deleted the task "{title}"')

    async def assign_user(self, actor: UserResponse, task_id: str, user_id: str) -> TaskResponse:
        """Add a board member to the task's assignees.

        Assigning someone already assigned changes nothing and records nothing.

        Raises:
            ResourceNotFoundError: If the task or user does not exist.
            ValidationError: If the user is not a member of the board.
        """
        session = self._session_factory()

        try:
            task, _, board = await self._get_task(session, actor, task_id)
            user = await UserRepo(session).get_by_id(user_id)
            if not user:
                raise ResourceNotFoundError("User", user_id)
            if user.id not in board.member_ids:
                raise ValidationError("User is not a member of this board")

            board_id, assignee_name = board.id, user.name
            assignee_repo = TaskAssigneeRepo(session)
            added = False
            if not await assignee_repo.is_assigned(task_id, user_id):
                try:
                    await assignee_repo.add(task_id, user_id)
                    added = True
                except IntegrityError:
                    # A concurrent request assigned the same user first
                    await session.rollback()

            task = await TaskRepo(session).get_by_id(task_id, fresh=True)
            response = TaskResponse.model_validate(task)
        finally:
            await session.close()

        if added:
            await self._announce(
                board_id,
                actor,
                f'{actor.name} assigned "{assignee_name}" to task "{response.title}"',
                task_id=response.id,
            )
        return response

    async def resequence_tasks(self, actor: UserResponse, list_id: str) -> list[TaskResponse]:
        """Renumber a list's tasks 0..n-1 in their current display order."""
        session = self._session_factory()

        try:
            task_list, board = await self._get_list(session, actor, list_id)
            tasks = await TaskRepo(session).get_for_list(list_id)
            changed = 0
            for position, task in enumerate(tasks):
                if task.order != position:
                    task.order = position
                    changed += 1
            if changed:
                await session.commit()
            response = [TaskResponse.model_validate(t) for t in tasks]
            board_id, list_title = board.id, task_list.title
        finally:
            await session.close()

        if changed:
            await self._announce(
                board_id,
                actor,
                f'{actor.name} tidied up the order of tasks in "{list_title}"',
                list_id=list_id,
            )
        return response
