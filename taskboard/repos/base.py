from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Generic repository with async CRUD operations."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def create_one(
        self,
        schema: CreateSchemaType,
        *,
        exclude_none: bool = False,
        auto_commit: bool = True,
    ) -> ModelType:
        """Create a single record."""
        data = schema.model_dump(exclude_none=exclude_none)
        instance = self.model(**data)
        self.session.add(instance)
        if auto_commit:
            await self.session.commit()
            await self.session.refresh(instance)
        else:
            await self.session.flush()
        return instance

    async def get_by_id(self, obj_id: str, *, fresh: bool = False) -> ModelType | None:
        """Get a record by its primary key.

        With ``fresh`` the row and its eager-loaded relationships are re-read
        even if the instance is already in the session.
        """
        return await self.session.get(self.model, obj_id, populate_existing=fresh)

    async def update_by_id(
        self,
        obj_id: str,
        schema: UpdateSchemaType,
        *,
        exclude_none: bool = True,
        auto_commit: bool = True,
    ) -> ModelType | None:
        """Update a record by ID."""
        instance = await self.get_by_id(obj_id)
        if not instance:
            return None

        data = schema.model_dump(exclude_none=exclude_none)
        for key, value in data.items():
            setattr(instance, key, value)

        if auto_commit:
            await self.session.commit()
            await self.session.refresh(instance)
        else:
            await self.session.flush()
        return instance

    async def count(self, **filters) -> int:
        """Count records, optionally matching column equality filters."""
        stmt = select(func.count()).select_from(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one()
