from loguru import logger
from sqlalchemy.exc import IntegrityError

from taskboard.core.constants import BoardOperation
from taskboard.core.exceptions.domain import ResourceNotFoundError, ValidationError
from taskboard.repos.board import BoardMemberRepo, BoardRepo
from taskboard.repos.task import TaskAssigneeRepo
from taskboard.repos.user import UserRepo
from taskboard.schemas.activity import ActivityResponse
from taskboard.schemas.board import BoardCreate, BoardRecord, BoardResponse, BoardUpdate
from taskboard.schemas.user import UserResponse
from taskboard.services.base import BoardScopedService


class BoardService(BoardScopedService):
    """Boards, ownership and membership."""

    async def create_board(self, actor: UserResponse, data: BoardCreate) -> BoardResponse:
        """Create a board owned by ``actor``, who also becomes its first member."""
        session = self._session_factory()

        try:
            board_repo = BoardRepo(session)
            board = await board_repo.create_one(
                BoardRecord(title=data.title, description=data.description, owner_id=actor.id),
                auto_commit=False,
            )
            await BoardMemberRepo(session).add(board.id, actor.id, auto_commit=False)
            await session.commit()

            board = await board_repo.get_by_id(board.id, fresh=True)
            response = BoardResponse.model_validate(board)
        finally:
            await session.close()

        logger.info(f"Board created: {response.id} by {actor.email}")
        await self._announce(response.id, actor, f'{actor.name} created the board "{response.title}"')
        return response

    async def list_boards(self, actor: UserResponse) -> list[BoardResponse]:
        """Boards the actor is a member of, newest first."""
        session = self._session_factory()

        try:
            boards = await BoardRepo(session).get_for_member(actor.id)
            return [BoardResponse.model_validate(b) for b in boards]
        finally:
            await session.close()

    async def get_board(self, actor: UserResponse, board_id: str) -> BoardResponse:
        session = self._session_factory()

        try:
            board = await self._get_board(session, actor, board_id, BoardOperation.READ)
            return BoardResponse.model_validate(board)
        finally:
            await session.close()

    async def update_board(
        self, actor: UserResponse, board_id: str, data: BoardUpdate
    ) -> BoardResponse:
        """Change title and/or description. Owner only."""
        if data.title is None and data.description is None:
            raise ValidationError("Nothing to update")

        session = self._session_factory()

        try:
            board = await self._get_board(session, actor, board_id, BoardOperation.UPDATE)
            old_title = board.title
            if data.title in (None, board.title) and data.description in (None, board.description):
                return BoardResponse.model_validate(board)

            board_repo = BoardRepo(session)
            await board_repo.update_by_id(board_id, data)

            board = await board_repo.get_by_id(board_id, fresh=True)
            response = BoardResponse.model_validate(board)
        finally:
            await session.close()

        if response.title != old_title:
            action = f'{actor.name} renamed the board "{old_title}" to "{response.title}"'
        else:
            action = f'{actor.name} updated the board "{response.title}"'
        await self._announce(board_id, actor, action)
        return response

    async def delete_board(self, actor: UserResponse, board_id: str) -> None:
        """Delete a board with all of its lists, tasks and activity. Owner only.

        The whole cascade is one transaction: on failure nothing is removed.
        """
        session = self._session_factory()

        try:
            await self._get_board(session, actor, board_id, BoardOperation.DELETE)
            await BoardRepo(session).delete_cascade(board_id)
            await session.commit()
        finally:
            await session.close()

        self._notifier.close_room(board_id)
        logger.info(f"Board deleted: {board_id} by {actor.email}")

    async def add_member(self, actor: UserResponse, board_id: str, email: str) -> BoardResponse:
        """Add a registered user to the board by email. Owner only.

        Raises:
            ResourceNotFoundError: If no user has that email.
            ValidationError: If the user is already a member.
        """
        session = self._session_factory()

        try:
            board = await self._get_board(session, actor, board_id, BoardOperation.ADD_MEMBER)

            user = await UserRepo(session).get_by_email(email)
            if not user:
                raise ResourceNotFoundError("User", email)
            if user.id in board.member_ids:
                raise ValidationError("User is already a member")

            try:
                await BoardMemberRepo(session).add(board_id, user.id)
            except IntegrityError as e:
                await session.rollback()
                raise ValidationError("User is already a member") from e
            board = await BoardRepo(session).get_by_id(board_id, fresh=True)
            response = BoardResponse.model_validate(board)
            added_name = user.name
        finally:
            await session.close()

        logger.info(f"Member {email} added to board {board_id}")
        await self._announce(board_id, actor, f'{actor.name} added "{added_name}" to the board')
        return response

    async def remove_member(
        self, actor: UserResponse, board_id: str, user_id: str
    ) -> BoardResponse:
        """Remove a member. The owner may remove anyone but themselves; members may leave.

        The removed user's task assignments on this board are revoked in the
        same transaction.
        """
        session = self._session_factory()

        try:
            board = await self._get_board(
                session, actor, board_id, BoardOperation.REMOVE_MEMBER, target_user_id=user_id
            )
            removed = next((m for m in board.members if m.id == user_id), None)
            if removed is None:
                raise ValidationError("User is not a member of this board")
            removed_name = removed.name

            await BoardMemberRepo(session).remove(board_id, user_id, auto_commit=False)
            revoked = await TaskAssigneeRepo(session).revoke_on_board(board_id, user_id)
            await session.commit()

            board = await BoardRepo(session).get_by_id(board_id, fresh=True)
            response = BoardResponse.model_validate(board)
        finally:
            await session.close()

        logger.info(
            f"Member {user_id} removed from board {board_id} ({revoked} assignments revoked)"
        )
        await self._announce(board_id, actor, f'{actor.name} removed "{removed_name}" from the board')
        self._notifier.evict(board_id, user_id)
        return response

    async def list_activity(self, actor: UserResponse, board_id: str) -> list[ActivityResponse]:
        """The board's activity log, most recent first. Members only."""
        session = self._session_factory()

        try:
            await self._get_board(session, actor, board_id, BoardOperation.READ)
        finally:
            await session.close()

        return await self._activity_log.list_for_board(board_id)
