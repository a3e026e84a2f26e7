"""API routes for categories."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import BulkExecutor, BulkOperationResponse, parse_bulk_request
from app.core.database import get_db
from app.core.security import Actor, get_current_actor, require_admin
from app.modules.categories.actions import CATEGORY_ACTIONS
from app.modules.categories.mappers import map_categories, map_category, map_tree_node
from app.modules.categories.schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
)
from app.modules.categories.service import CategoryService

router = APIRouter()


# ============================================================================
# Public Routes
# ============================================================================


@router.get(
    "/categories/tree",
    response_model=CategoryTreeResponse,
    summary="Category tree",
)
async def get_category_tree(db: AsyncSession = Depends(get_db)) -> CategoryTreeResponse:
    """Full category tree (first ``category_tree_limit`` categories)."""
    service = CategoryService(db)
    roots, total, truncated = await service.get_tree()
    return CategoryTreeResponse(
        items=[map_tree_node(node) for node in roots],
        total=total,
        truncated=truncated,
    )


@router.get(
    "/categories/leaves",
    response_model=CategoryListResponse,
    summary="Leaf categories",
)
async def get_leaf_categories(db: AsyncSession = Depends(get_db)) -> CategoryListResponse:
    """Categories without subcategories."""
    leaves = await CategoryService(db).get_leaves()
    return CategoryListResponse(items=map_categories(leaves), total=len(leaves))


@router.get(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Get category",
)
async def get_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    return map_category(await CategoryService(db).get_by_id(category_id))


@router.get(
    "/categories/{category_id}/breadcrumb",
    response_model=CategoryListResponse,
    summary="Category breadcrumb",
)
async def get_category_breadcrumb(
    category_id: str,
    db: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    """Ancestors of a category, root first, ending with the category itself."""
    path = await CategoryService(db).get_breadcrumb(category_id)
    return CategoryListResponse(items=map_categories(path), total=len(path))


# ============================================================================
# Admin Routes
# ============================================================================


@router.post(
    "/admin/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    data: CategoryCreate,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    return map_category(await CategoryService(db).create(data))


@router.patch(
    "/admin/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Update category",
)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Update a category. Moving it under one of its own descendants is rejected."""
    return map_category(await CategoryService(db).update(category_id, data))


@router.post(
    "/categories/bulk",
    response_model=BulkOperationResponse,
    summary="Bulk category actions",
)
async def bulk_categories(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> BulkOperationResponse:
    """Apply one action to many categories.

    Admin only: activate, deactivate, feature, unfeature, approve, reject,
    delete. Delete is refused for categories with subcategories or products.
    """
    request = parse_bulk_request(payload)
    return await BulkExecutor(db, CATEGORY_ACTIONS).execute(actor, request)
