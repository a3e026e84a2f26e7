"""Mappers for transforming category models to response schemas."""

from app.modules.categories.models import Category
from app.modules.categories.schemas import (
    CategoryHierarchy,
    CategoryResponse,
    CategoryStatusDisplay,
    CategoryTreeNodeResponse,
)
from app.modules.categories.tree import CategoryTreeNode


def map_category_status(is_active: bool) -> CategoryStatusDisplay:
    return CategoryStatusDisplay(
        is_active=is_active,
        label="Active" if is_active else "Inactive",
        color="green" if is_active else "gray",
    )


def map_category(category: Category) -> CategoryResponse:
    """Map a Category model to CategoryResponse."""
    commission = category.commission_rate or 0
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        icon=category.icon,
        sort_order=category.sort_order,
        commission_rate=commission,
        commission_rate_formatted=f"{float(commission):.1f}%",
        is_featured=category.is_featured,
        needs_review=category.needs_review,
        hierarchy=CategoryHierarchy(
            parent_id=category.parent_id,
            is_root=category.parent_id is None,
        ),
        status=map_category_status(category.is_active),
        url=f"/categories/{category.slug}",
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def map_categories(categories: list[Category]) -> list[CategoryResponse]:
    return [map_category(c) for c in categories]


def map_tree_node(node: CategoryTreeNode) -> CategoryTreeNodeResponse:
    """Map a tree node and its subtree."""
    return CategoryTreeNodeResponse(
        **map_category(node.category).model_dump(),
        children=[map_tree_node(child) for child in node.children],
        orphaned=node.orphaned,
    )
