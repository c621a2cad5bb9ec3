from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.activity import Activity
from taskboard.repos.base import BaseRepository
from taskboard.schemas.activity import ActivityCreate


class ActivityRepo(BaseRepository[Activity, ActivityCreate, ActivityCreate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Activity)

    async def get_for_board(self, board_id: str) -> list[Activity]:
        """Get a board's activity, most recent first."""
        stmt = (
            select(Activity)
            .where(Activity.board_id == board_id)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
