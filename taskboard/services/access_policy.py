"""Authorization rules for board-scoped operations.

Pure functions of (acting user, board, operation): no I/O, so callers load
the board with its members first and must run the check before mutating.
"""

from taskboard.core.constants import BoardOperation
from taskboard.core.exceptions.domain import AuthorizationError, ValidationError
from taskboard.models.board import Board

MEMBER_OPERATIONS = frozenset({BoardOperation.READ, BoardOperation.EDIT_CONTENT})
OWNER_OPERATIONS = frozenset(
    {BoardOperation.UPDATE, BoardOperation.DELETE, BoardOperation.ADD_MEMBER}
)


def authorize(
    actor_id: str,
    board: Board,
    operation: BoardOperation,
    *,
    target_user_id: str | None = None,
) -> None:
    """Raise unless ``actor_id`` may perform ``operation`` on ``board``.

    Raises:
        AuthorizationError: If the actor lacks the privilege.
        ValidationError: If the owner tries to remove themselves.
    """
    if actor_id not in board.member_ids:
        raise AuthorizationError()

    if operation in MEMBER_OPERATIONS:
        return

    is_owner = actor_id == board.owner_id
    if operation in OWNER_OPERATIONS:
        if not is_owner:
            raise AuthorizationError("Only the board owner can do this")
        return

    if operation == BoardOperation.REMOVE_MEMBER:
        if target_user_id is None:
            raise ValueError("target_user_id is required to remove a member")
        if target_user_id == board.owner_id:
            if is_owner:
                raise ValidationError("Cannot remove board owner")
            raise AuthorizationError("Only the board owner can remove other members")
        if not is_owner and target_user_id != actor_id:
            raise AuthorizationError("Only the board owner can remove other members")
        return

    raise ValueError(f"Unknown board operation: {operation}")


def is_allowed(
    actor_id: str,
    board: Board,
    operation: BoardOperation,
    *,
    target_user_id: str | None = None,
) -> bool:
    try:
        authorize(actor_id, board, operation, target_user_id=target_user_id)
    except (AuthorizationError, ValidationError):
        return False
    return True
