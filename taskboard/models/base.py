import re
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

from taskboard.core.constants import FieldSizes


def new_id() -> str:
    """Opaque, URL-safe identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    __abstract__ = True

    id: Mapped[str] = mapped_column(String(FieldSizes.ID), primary_key=True, default=new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    @declared_attr.directive
    @classmethod
    def __tablename__(cls) -> str:
        """Auto-generate table name from class name (PascalCase → snake_case)."""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()
