"""
Base CRUD operations for SQLAlchemy models.

Provides generic Create, Read, Update, Delete operations that can be
inherited and extended by model-specific CRUD classes.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.base import Base, to_uuid

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Ids may be given as UUIDs or UUID strings. Methods flush but never
    commit; the caller owns the transaction.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID | str) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == to_uuid(id))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: UUID | str,
        **kwargs,
    ) -> bool:
        """
        Update a record by primary key.

        Returns:
            True if a row was updated, False if not found
        """
        stmt = update(self.model).where(self.model.id == to_uuid(id)).values(**kwargs)
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def delete_by_id(self, session: AsyncSession, id: UUID | str) -> bool:
        """
        Delete a record by primary key.

        Returns:
            True if record was deleted, False if not found
        """
        stmt = delete(self.model).where(self.model.id == to_uuid(id))
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def delete_many(self, session: AsyncSession, ids: Sequence[UUID | str]) -> int:
        """
        Delete several records by primary key. An empty list is a no-op.

        Returns:
            Number of deleted rows
        """
        if not ids:
            return 0
        stmt = delete(self.model).where(self.model.id.in_([to_uuid(i) for i in ids]))
        result = await session.execute(stmt)
        return result.rowcount

    async def exists(self, session: AsyncSession, id: UUID | str) -> bool:
        """Check if a record exists by primary key."""
        stmt = select(self.model.id).where(self.model.id == to_uuid(id))
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
