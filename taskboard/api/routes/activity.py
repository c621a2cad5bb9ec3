from fastapi import APIRouter

from taskboard.api.deps import CurrentUser, Services
from taskboard.schemas.activity import ActivityResponse

router = APIRouter(tags=["activity"])


@router.get("/activity/{board_id}", response_model=list[ActivityResponse])
async def list_activity(board_id: str, user: CurrentUser, services: Services):
    """The board's activity log, most recent first."""
    return await services.boards.list_activity(user, board_id)
