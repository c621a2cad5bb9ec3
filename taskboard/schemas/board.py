from pydantic import EmailStr, Field

from taskboard.core.constants import FieldSizes
from taskboard.schemas.base import BaseSchema, BaseTimestampSchema
from taskboard.schemas.user import UserPublic


class BoardCreate(BaseSchema):
    title: str = Field(min_length=1, max_length=FieldSizes.TITLE)
    description: str = ""


class BoardUpdate(BaseSchema):
    title: str | None = Field(default=None, min_length=1, max_length=FieldSizes.TITLE)
    description: str | None = None


class BoardRecord(BaseSchema):
    """Internal schema for creating a board in the database."""

    title: str
    description: str
    owner_id: str


class MemberAdd(BaseSchema):
    email: EmailStr


class BoardMemberCreate(BaseSchema):
    board_id: str
    user_id: str


class BoardResponse(BaseTimestampSchema):
    id: str
    title: str
    description: str
    owner_id: str
    members: list[UserPublic]
