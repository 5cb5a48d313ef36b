"""
Base repository.

Generic CRUD operations shared by all repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic CRUD operations.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class PlanRepository(BaseRepository[Plan]):
            def __init__(self, session: AsyncSession):
                super().__init__(Plan, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None if not found
        """
        return await self.session.get(self.model, id)

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get single entity by filters.

        Args:
            **filters: Column filters

        Returns:
            Matching entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by(self, **filters: Any) -> list[ModelType]:
        """
        Find entities by filters, ordered by primary key.

        Args:
            **filters: Column filters

        Returns:
            List of matching entities
        """
        stmt = select(self.model).filter_by(**filters).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity.

        Args:
            **data: Entity data

        Returns:
            Created entity with database defaults loaded
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(
        self, id: int, for_update: bool = False, **data: Any
    ) -> ModelType | None:
        """
        Update entity by ID.

        Args:
            id: Entity ID
            for_update: Use SELECT FOR UPDATE to lock the row
            **data: Updated data

        Returns:
            Updated entity or None if not found
        """
        if for_update:
            stmt = select(self.model).where(self.model.id == id).with_for_update()
            result = await self.session.execute(stmt)
            entity = result.scalar_one_or_none()
        else:
            entity = await self.get_by_id(id)

        if not entity:
            return None

        for key, value in data.items():
            setattr(entity, key, value)

        await self.session.flush()
        return entity

    async def delete(self, id: int) -> bool:
        """
        Delete entity by ID.

        Args:
            id: Entity ID

        Returns:
            True if deleted, False if not found
        """
        stmt = delete(self.model).where(self.model.id == id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def count(self, **filters: Any) -> int:
        """
        Count entities matching filters.

        Args:
            **filters: Column filters

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, **filters: Any) -> bool:
        """
        Check if entity exists.

        Args:
            **filters: Column filters

        Returns:
            True if exists, False otherwise
        """
        return await self.count(**filters) > 0

    async def find_paginated(
        self,
        page: int = 1,
        per_page: int = 50,
        newest_first: bool = True,
        **filters: Any,
    ) -> tuple[list[ModelType], int]:
        """
        Find entities page by page.

        Args:
            page: Page number (1-indexed)
            per_page: Items per page
            newest_first: Order by descending primary key
            **filters: Column filters

        Returns:
            Tuple of (items, total_count)
        """
        total = await self.count(**filters)

        order = self.model.id.desc() if newest_first else self.model.id
        offset = (max(page, 1) - 1) * per_page
        stmt = (
            select(self.model)
            .filter_by(**filters)
            .order_by(order)
            .offset(offset)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
