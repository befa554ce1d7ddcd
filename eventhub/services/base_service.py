"""Base service class with common database operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.exceptions import NotFoundError, PersistenceError
from eventhub.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(Generic[ModelType]):
    """Base service with common CRUD operations.

    ``load_options`` are applied to every lookup so relationships used by
    the response schemas are loaded eagerly.
    """

    load_options: tuple = ()

    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db = db
        self.model = model

    def query(self) -> Select:
        return select(self.model).options(*self.load_options)

    async def get_by_id(self, id: Any) -> ModelType | None:
        """Get entity by primary key."""
        result = await self.db.execute(
            self.query()
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, id: Any) -> ModelType:
        obj = await self.get_by_id(id)
        if obj is None:
            raise NotFoundError(f"{self.model.__name__} {id} not found")
        return obj

    async def get_all(self) -> list[ModelType]:
        """Get all entities."""
        result = await self.db.execute(self.query().order_by(self.model.id))
        return list(result.scalars().all())

    async def commit(self) -> None:
        """Commit, rolling back before re-raising on failure."""
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def persist(self, obj: ModelType) -> ModelType:
        """Insert or update an entity and commit it."""
        self.db.add(obj)
        try:
            await self.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(details={"error": str(e)}) from e
        return obj

    async def reload(self, obj: ModelType) -> ModelType:
        """Fetch a committed entity again with its relationships."""
        return await self.get_or_404(obj.id)

    async def save(self, obj: ModelType) -> ModelType:
        """Insert or update an entity and reload it with its relationships."""
        await self.persist(obj)
        return await self.reload(obj)

    async def delete(self, obj: ModelType) -> None:
        """Delete entity."""
        await self.db.delete(obj)
        try:
            await self.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(details={"error": str(e)}) from e
