from fastapi import APIRouter, status

from taskboard.api.deps import CurrentUser, Services
from taskboard.schemas.task_list import ListCreate, ListResponse, ListUpdate

router = APIRouter(tags=["lists"])


@router.post("/list/create", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
async def create_list(data: ListCreate, user: CurrentUser, services: Services):
    return await services.lists.create_list(user, data)


@router.get("/lists/{board_id}", response_model=list[ListResponse])
async def list_lists(board_id: str, user: CurrentUser, services: Services):
    return await services.lists.list_lists(user, board_id)


@router.patch("/list/edit/{list_id}", response_model=ListResponse)
async def update_list(list_id: str, data: ListUpdate, user: CurrentUser, services: Services):
    return await services.lists.update_list(user, list_id, data)


@router.delete("/list/del/{list_id}")
async def delete_list(list_id: str, user: CurrentUser, services: Services):
    await services.lists.delete_list(user, list_id)
    return {"message": "List deleted"}


@router.post("/lists/{board_id}/resequence", response_model=list[ListResponse])
async def resequence_lists(board_id: str, user: CurrentUser, services: Services):
    return await services.lists.resequence_lists(user, board_id)
