from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.core.constants import FieldSizes
from taskboard.models.base import Base


class User(Base):
    name: Mapped[str] = mapped_column(String(FieldSizes.NAME), nullable=False)
    email: Mapped[str] = mapped_column(
        String(FieldSizes.MEDIUM), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(FieldSizes.LONG), nullable=False)
