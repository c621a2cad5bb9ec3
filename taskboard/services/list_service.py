from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.constants import BoardOperation
from taskboard.core.exceptions.domain import ResourceNotFoundError, ValidationError
from taskboard.models.board import Board
from taskboard.models.task_list import TaskList
from taskboard.repos.task_list import TaskListRepo
from taskboard.schemas.task_list import ListCreate, ListRecord, ListResponse, ListUpdate
from taskboard.schemas.user import UserResponse
from taskboard.services.base import BoardScopedService


class ListService(BoardScopedService):
    """Ordered lists (columns) within a board."""

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

    async def create_list(self, actor: UserResponse, data: ListCreate) -> ListResponse:
        """Create a list; without an explicit order it goes after the last one."""
        session = self._session_factory()

        try:
            board = await self._get_board(
                session, actor, data.board_id, BoardOperation.EDIT_CONTENT
            )
            repo = TaskListRepo(session)
            order = data.order if data.order is not None else await repo.next_order(board.id)
            task_list = await repo.create_one(
                ListRecord(title=data.title, board_id=board.id, order=order)
            )
            response = ListResponse.model_validate(task_list)
        finally:
            await session.close()

        await self._announce(
            response.board_id,
            actor,
            f'{actor.name} created list "{response.title}"',
            list_id=response.id,
        )
        return response

    async def list_lists(self, actor: UserResponse, board_id: str) -> list[ListResponse]:
        """A board's lists in display order."""
        session = self._session_factory()

        try:
            await self._get_board(session, actor, board_id, BoardOperation.READ)
            lists = await TaskListRepo(session).get_for_board(board_id)
            return [ListResponse.model_validate(item) for item in lists]
        finally:
            await session.close()

    async def update_list(
        self, actor: UserResponse, list_id: str, data: ListUpdate
    ) -> ListResponse:
        """Rename and/or reposition a list in one transaction.

        ``order`` is stored as given; other lists are not renumbered.
        """
        if data.title is None and data.order is None:
            raise ValidationError("Nothing to update")

        session = self._session_factory()

        try:
            task_list, _ = await self._get_list(session, actor, list_id)
            old_title, old_order = task_list.title, task_list.order
            task_list = await TaskListRepo(session).update_by_id(list_id, data)
            response = ListResponse.model_validate(task_list)
        finally:
            await session.close()

        renamed = response.title != old_title
        moved = response.order != old_order
        if not renamed and not moved:
            return response

        if renamed and moved:
            action = (
                f'{actor.name} renamed list "{old_title}" to "{response.title}" '
                f"and moved it to position {response.order}"
            )
        elif renamed:
            action = f'{actor.name} renamed list "{old_title}" to "{response.title}"'
        else:
            action = f'{actor.name} moved list "{response.title}" to position {response.order}'
        await self._announce(response.board_id, actor, action, list_id=response.id)
        return response

    async def rename_list(self, actor: UserResponse, list_id: str, title: str) -> ListResponse:
        return await self.update_list(actor, list_id, ListUpdate(title=title))

    async def reorder_list(self, actor: UserResponse, list_id: str, order: int) -> ListResponse:
        return await self.update_list(actor, list_id, ListUpdate(order=order))

    async def delete_list(self, actor: UserResponse, list_id: str) -> None:
        """Delete a list and every task in it."""
        session = self._session_factory()

        try:
            task_list, board = await self._get_list(session, actor, list_id)
            title, board_id = task_list.title, board.id
            await TaskListRepo(session).delete_cascade(list_id)
            await session.commit()
        finally:
            await session.close()

        logger.info(f"List deleted: {list_id} on board {board_id}")
        await self._announce(board_id, actor, f'{actor.name} deleted list "{title}"')

    async def resequence_lists(self, actor: UserResponse, board_id: str) -> list[ListResponse]:
        """Renumber a board's lists 0..n-1 in their current display order."""
        session = self._session_factory()

        try:
            await self._get_board(session, actor, board_id, BoardOperation.EDIT_CONTENT)
            lists = await TaskListRepo(session).get_for_board(board_id)
            changed = 0
            for position, task_list in enumerate(lists):
                if task_list.order != position:
                    task_list.order = position
                    changed += 1
            if changed:
                await session.commit()
            response = [ListResponse.model_validate(item) for item in lists]
        finally:
            await session.close()

        if changed:
            await self._announce(board_id, actor, f"{actor.name} tidied up the order of lists")
        return response
