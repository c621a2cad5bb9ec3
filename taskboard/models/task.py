from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.core.constants import FieldSizes
from taskboard.models.base import Base
from taskboard.models.user import User


class Task(Base):
    list_id: Mapped[str] = mapped_column(
        ForeignKey("task_list.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(FieldSizes.MEDIUM), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Assignment rows are written through TaskAssigneeRepo; this side is read-only
    assigned_users: Mapped[list[User]] = relationship(
        secondary="task_assignee",
        viewonly=True,
        lazy="selectin",
        order_by="User.name",
    )


class TaskAssignee(Base):
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_task_assignee"),)

    task_id: Mapped[str] = mapped_column(
        ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
