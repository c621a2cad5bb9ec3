from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.user import User
from taskboard.repos.base import BaseRepository
from taskboard.schemas.user import UserCreate


class UserRepo(BaseRepository[User, UserCreate, UserCreate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
