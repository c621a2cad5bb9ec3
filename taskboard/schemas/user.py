import string

from pydantic import EmailStr, Field, SecretStr, field_validator

from taskboard.core.constants import FieldSizes
from taskboard.schemas.base import BaseSchema, BaseTimestampSchema


class UserRegister(BaseSchema):
    name: str = Field(min_length=1, max_length=FieldSizes.NAME)
    email: EmailStr
    password: SecretStr = Field(min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: SecretStr) -> SecretStr:
        password = v.get_secret_value()
        if not any(c.islower() for c in password):
            raise ValueError("Password must contain at least one lowercase letter")
        if not any(c.isupper() for c in password):
            raise ValueError("Password must contain at least one uppercase letter")
        if not any(c.isdigit() for c in password):
            raise ValueError("Password must contain at least one digit")
        if not any(c in string.punctuation for c in password):
            raise ValueError("Password must contain at least one symbol")
        return v


class UserLogin(BaseSchema):
    email: str
    password: SecretStr


class UserCreate(BaseSchema):
    """Internal schema for creating a user in the database."""

    name: str
    email: str
    password_hash: str


class UserPublic(BaseSchema):
    """User reference embedded in boards, tasks and activity entries."""

    id: str
    name: str
    email: str


class UserResponse(BaseTimestampSchema):
    id: str
    name: str
    email: str


class AuthResponse(BaseSchema):
    user: UserResponse
    token: str
