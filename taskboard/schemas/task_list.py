from pydantic import Field

from taskboard.core.constants import FieldSizes
from taskboard.schemas.base import BaseSchema, BaseTimestampSchema


class ListCreate(BaseSchema):
    title: str = Field(min_length=1, max_length=FieldSizes.TITLE)
    board_id: str
    order: int | None = None


class ListUpdate(BaseSchema):
    title: str | None = Field(default=None, min_length=1, max_length=FieldSizes.TITLE)
    order: int | None = None


class ListRecord(BaseSchema):
    """Internal schema for creating a list in the database."""

    title: str
    board_id: str
    order: int


class ListResponse(BaseTimestampSchema):
    id: str
    board_id: str
    title: str
    order: int
