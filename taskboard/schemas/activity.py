from datetime import datetime

from taskboard.schemas.base import BaseSchema
from taskboard.schemas.user import UserPublic


class ActivityCreate(BaseSchema):
    board_id: str
    user_id: str
    action: str
    task_id: str | None = None
    list_id: str | None = None


class ActivityResponse(BaseSchema):
    id: str
    board_id: str
    user_id: str
    user: UserPublic
    action: str
    task_id: str | None = None
    list_id: str | None = None
    created_at: datetime
