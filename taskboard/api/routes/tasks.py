from fastapi import APIRouter, status

from taskboard.api.deps import CurrentUser, Services
from taskboard.schemas.task import TaskAssign, TaskCreate, TaskResponse, TaskUpdate

router = APIRouter(tags=["tasks"])


@router.post("/task/create", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreate, user: CurrentUser, services: Services):
    return await services.tasks.create_task(user, data)


@router.get("/tasks/{list_id}", response_model=list[TaskResponse])
async def list_tasks(list_id: str, user: CurrentUser, services: Services):
    return await services.tasks.list_tasks(user, list_id)


@router.patch("/task/edit/{task_id}", response_model=TaskResponse)
async def update_task(task_id: str, data: TaskUpdate, user: CurrentUser, services: Services):
    """Edit fields, or move the task by sending ``listId`` and/or ``order``."""
    return await services.tasks.update_task(user, task_id, data)


@router.delete("/task/del/{task_id}")
async def delete_task(task_id: str, user: CurrentUser, services: Services):
    await services.tasks.delete_task(user, task_id)
    return {"message": "Task deleted"}


@router.patch("/task/{task_id}/assign", response_model=TaskResponse)
async def assign_user(task_id: str, data: TaskAssign, user: CurrentUser, services: Services):
    return await services.tasks.assign_user(user, task_id, data.user_id)


@router.post("/tasks/{list_id}/resequence", response_model=list[TaskResponse])
async def resequence_tasks(list_id: str, user: CurrentUser, services: Services):
    return await services.tasks.resequence_tasks(user, list_id)
