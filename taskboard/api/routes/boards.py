from fastapi import APIRouter, status

from taskboard.api.deps import CurrentUser, Services
from taskboard.schemas.board import BoardCreate, BoardResponse, BoardUpdate, MemberAdd

router = APIRouter(tags=["boards"])


@router.post("/board/create", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
async def create_board(data: BoardCreate, user: CurrentUser, services: Services):
    return await services.boards.create_board(user, data)


@router.get("/boards", response_model=list[BoardResponse])
async def list_boards(user: CurrentUser, services: Services):
    return await services.boards.list_boards(user)


@router.get("/board/{board_id}", response_model=BoardResponse)
async def get_board(board_id: str, user: CurrentUser, services: Services):
    return await services.boards.get_board(user, board_id)


@router.patch("/board/edit/{board_id}", response_model=BoardResponse)
async def update_board(board_id: str, data: BoardUpdate, user: CurrentUser, services: Services):
    return await services.boards.update_board(user, board_id, data)


@router.delete("/board/del/{board_id}")
async def delete_board(board_id: str, user: CurrentUser, services: Services):
    await services.boards.delete_board(user, board_id)
    return {"message": "Board deleted"}


@router.post("/board/{board_id}/addMember", response_model=BoardResponse)
async def add_member(board_id: str, data: MemberAdd, user: CurrentUser, services: Services):
    return await services.boards.add_member(user, board_id, data.email)


@router.delete("/board/{board_id}/removeMember/{user_id}", response_model=BoardResponse)
async def remove_member(board_id: str, user_id: str, user: CurrentUser, services: Services):
    return await services.boards.remove_member(user, board_id, user_id)
