"""Base service with common read operations.

Provides reusable patterns for the service layer.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.base_model import Base
from app.core.exceptions import NotFoundError

# Type variable for models
ModelT = TypeVar("ModelT", bound=Base)


class BaseService(Generic[ModelT]):
    """Base service class with common lookups.

    Usage:
        class CategoryService(BaseService[Category]):
            model = Category

            async def get_by_id(self, category_id: str) -> Category:
                return await self._get_by_id(category_id)
    """

    # Override in subclass
    model: type[ModelT]

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_by_id(self, entity_id: str) -> ModelT:
        """Get entity by ID.

        Raises:
            NotFoundError: If entity not found
        """
        result = await self.db.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        entity = result.scalar_one_or_none()

        if not entity:
            raise NotFoundError(self.model.__name__, entity_id)

        return entity

    async def _exists(self, *conditions: Any) -> bool:
        """True when at least one row matches all ``conditions``."""
        stmt = select(self.model.id)
        for condition in conditions:
            stmt = stmt.where(condition)
        result = await self.db.execute(stmt.limit(1))
        return result.first() is not None

    async def _list(
        self,
        *,
        filters: list[Any] | None = None,
        order_by: list[Any] | None = None,
        limit: int | None = None,
    ) -> list[ModelT]:
        """List entities, optionally filtered, ordered and capped."""
        stmt = select(self.model)

        if filters:
            for filter_condition in filters:
                stmt = stmt.where(filter_condition)

        if order_by:
            stmt = stmt.order_by(*order_by)
        elif hasattr(self.model, "sort_order"):
            stmt = stmt.order_by(self.model.sort_order)

        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
