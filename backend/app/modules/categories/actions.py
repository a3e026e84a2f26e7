"""Bulk actions for categories (admin only)."""

from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import ActionSpec, ActionTable, remove, set_fields
from app.modules.categories.models import Category
from app.modules.products.models import Product


class CategoryAction(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    FEATURE = "feature"
    UNFEATURE = "unfeature"
    APPROVE = "approve"
    REJECT = "reject"
    DELETE = "delete"


async def category_has_no_children(db: AsyncSession, category: Category) -> str | None:
    result = await db.execute(
        select(Category.id).where(Category.parent_id == category.id).limit(1)
    )
    if result.first() is not None:
        return f"Category {category.id} has subcategories"
    return None


async def category_has_no_products(db: AsyncSession, category: Category) -> str | None:
    result = await db.execute(
        select(Product.id).where(Product.category_id == category.id).limit(1)
    )
    if result.first() is not None:
        return f"Category {category.id} has products"
    return None


CATEGORY_ACTIONS: ActionTable[CategoryAction] = ActionTable(
    "categories",
    Category,
    CategoryAction,
    {
        CategoryAction.ACTIVATE: ActionSpec(set_fields(is_active=True)),
        CategoryAction.DEACTIVATE: ActionSpec(set_fields(is_active=False)),
        CategoryAction.FEATURE: ActionSpec(set_fields(is_featured=True)),
        CategoryAction.UNFEATURE: ActionSpec(set_fields(is_featured=False)),
        CategoryAction.APPROVE: ActionSpec(set_fields(needs_review=False, is_active=True)),
        CategoryAction.REJECT: ActionSpec(set_fields(needs_review=False, is_active=False)),
        CategoryAction.DELETE: ActionSpec(
            remove,
            guards=(category_has_no_children, category_has_no_products),
        ),
    },
)
