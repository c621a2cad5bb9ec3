from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.core.constants import FieldSizes
from taskboard.models.base import Base
from taskboard.models.user import User


class Activity(Base):
    board_id: Mapped[str] = mapped_column(
        ForeignKey("board.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    action: Mapped[str] = mapped_column(Text, nullable=False)

    # Historical pointers only: entries outlive the tasks and lists they mention
    task_id: Mapped[str | None] = mapped_column(String(FieldSizes.ID), nullable=True)
    list_id: Mapped[str | None] = mapped_column(String(FieldSizes.ID), nullable=True)

    user: Mapped[User] = relationship(lazy="selectin")
