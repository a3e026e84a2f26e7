"""Category service - reads, tree building and hierarchy-safe writes."""

from sqlalchemy import select

from app.config import settings
from app.core.base_service import BaseService
from app.core.exceptions import AlreadyExistsError, ValidationError
from app.core.logging import get_logger
from app.modules.categories.models import Category
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate
from app.modules.categories.tree import (
    CategoryTreeNode,
    build_breadcrumb,
    build_category_tree,
    check_circular_reference,
    find_leaf_categories,
)

logger = get_logger(__name__)


class CategoryService(BaseService[Category]):
    """Service for category operations."""

    model = Category

    async def get_by_id(self, category_id: str) -> Category:
        return await self._get_by_id(category_id)

    async def list_page(self) -> tuple[list[Category], bool]:
        """Categories up to ``category_tree_limit``, plus whether the cap was hit."""
        limit = settings.category_tree_limit
        categories = await self._list(
            order_by=[Category.sort_order, Category.name],
            limit=limit,
        )
        truncated = len(categories) >= limit
        if truncated:
            logger.warning("category_tree_truncated", limit=limit)
        return categories, truncated

    async def get_tree(self) -> tuple[list[CategoryTreeNode], int, bool]:
        """Build the category forest from one page of categories.

        Returns:
            Tuple of (roots, categories_fetched, truncated)
        """
        categories, truncated = await self.list_page()
        return build_category_tree(categories), len(categories), truncated

    async def get_leaves(self) -> list[Category]:
        categories, _ = await self.list_page()
        return find_leaf_categories(categories)

    async def get_breadcrumb(self, category_id: str) -> list[Category]:
        """Root-to-category path. Walks the whole table, not a page."""
        await self.get_by_id(category_id)
        return build_breadcrumb(category_id, await self._list())

    async def create(self, data: CategoryCreate) -> Category:
        """Create a category.

        Raises:
            AlreadyExistsError: slug taken
            ValidationError: parent does not exist
        """
        await self._ensure_unique_slug(data.slug)
        if data.parent_id is not None:
            await self._ensure_parent_exists(data.parent_id)

        category = Category(**data.model_dump())
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)

        logger.info("category_created", category_id=category.id, parent_id=category.parent_id)
        return category

    async def update(self, category_id: str, data: CategoryUpdate) -> Category:
        """Update a category; re-parenting is checked for cycles.

        Raises:
            NotFoundError: category does not exist
            AlreadyExistsError: new slug taken
            ValidationError / CircularReferenceError: invalid parent
        """
        category = await self.get_by_id(category_id)
        changes = data.model_dump(exclude_unset=True)

        if "slug" in changes and changes["slug"] != category.slug:
            await self._ensure_unique_slug(changes["slug"])

        parent_id = changes.get("parent_id")
        if parent_id is not None and parent_id != category.parent_id:
            await self._ensure_parent_exists(parent_id)
            await self._ensure_acyclic(category_id, parent_id)

        for name, value in changes.items():
            setattr(category, name, value)

        await self.db.commit()
        await self.db.refresh(category)

        logger.info("category_updated", category_id=category.id, fields=sorted(changes))
        return category

    async def _ensure_unique_slug(self, slug: str) -> None:
        if await self._exists(Category.slug == slug):
            raise AlreadyExistsError("Category", "slug", slug)

    async def _ensure_parent_exists(self, parent_id: str) -> None:
        if not await self._exists(Category.id == parent_id):
            raise ValidationError(
                f"Parent category {parent_id} not found",
                errors=[{"field": "parent_id", "value": parent_id}],
            )

    async def _ensure_acyclic(self, category_id: str, parent_id: str) -> None:
        result = await self.db.execute(
            select(Category.id, Category.parent_id, Category.name, Category.sort_order)
        )
        check_circular_reference(category_id, [parent_id], result.all())
