from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.core.constants import FieldSizes
from taskboard.models.base import Base


class TaskList(Base):
    board_id: Mapped[str] = mapped_column(
        ForeignKey("board.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(FieldSizes.TITLE), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
