from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard.core.constants import FieldSizes
from taskboard.models.base import Base
from taskboard.models.user import User


class Board(Base):
    title: Mapped[str] = mapped_column(String(FieldSizes.TITLE), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Membership rows are written through BoardMemberRepo; this side is read-only
    members: Mapped[list[User]] = relationship(
        secondary="board_member",
        viewonly=True,
        lazy="selectin",
        order_by="User.name",
    )

    @property
    def member_ids(self) -> set[str]:
        return {member.id for member in self.members}


class BoardMember(Base):
    __table_args__ = (UniqueConstraint("board_id", "user_id", name="uq_board_member"),)

    board_id: Mapped[str] = mapped_column(
        ForeignKey("board.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
