from typing import Any

from taskboard.core.constants import ClientMessage, EventType
from taskboard.schemas.base import BaseSchema


class BoardEvent(BaseSchema):
    type: EventType
    board_id: str
    data: dict[str, Any]


class ClientCommand(BaseSchema):
    type: ClientMessage
    board_id: str | None = None
