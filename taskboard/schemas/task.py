from pydantic import Field

from taskboard.core.constants import FieldSizes
from taskboard.schemas.base import BaseSchema, BaseTimestampSchema
from taskboard.schemas.user import UserPublic


class TaskCreate(BaseSchema):
    title: str = Field(min_length=1, max_length=FieldSizes.MEDIUM)
    description: str = ""
    list_id: str
    order: int | None = None


class TaskUpdate(BaseSchema):
    """Partial edit; ``list_id`` and ``order`` together move the task."""

    title: str | None = Field(default=None, min_length=1, max_length=FieldSizes.MEDIUM)
    description: str | None = None
    list_id: str | None = None
    order: int | None = None


class TaskRecord(BaseSchema):
    """Internal schema for creating a task in the database."""

    title: str
    description: str
    list_id: str
    order: int


class TaskAssign(BaseSchema):
    user_id: str


class TaskAssigneeCreate(BaseSchema):
    task_id: str
    user_id: str


class TaskResponse(BaseTimestampSchema):
    id: str
    list_id: str
    title: str
    description: str
    order: int
    assigned_users: list[UserPublic]
