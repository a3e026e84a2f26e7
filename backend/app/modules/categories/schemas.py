"""Pydantic schemas for categories."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    """Fields shared by create and response schemas."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=150, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=50)
    sort_order: int = Field(default=0, ge=0)
    commission_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""

    parent_id: str | None = None
    is_active: bool = True
    is_featured: bool = False


class CategoryUpdate(BaseModel):
    """Schema for updating a category. Unset fields are left alone."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(
        default=None, min_length=1, max_length=150, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
    )
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=50)
    sort_order: int | None = Field(default=None, ge=0)
    commission_rate: Decimal | None = Field(default=None, ge=0, le=100)
    parent_id: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None


class CategoryStatusDisplay(BaseModel):
    """Status badge shown in admin tables."""

    is_active: bool
    label: str
    color: str


class CategoryHierarchy(BaseModel):
    """Position of a category in the tree."""

    parent_id: str | None = None
    is_root: bool


class CategoryResponse(BaseModel):
    """Category as shown to clients."""

    id: str
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    sort_order: int
    commission_rate: Decimal
    commission_rate_formatted: str
    is_featured: bool
    needs_review: bool
    hierarchy: CategoryHierarchy
    status: CategoryStatusDisplay
    url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryTreeNodeResponse(CategoryResponse):
    """Category with nested children."""

    children: list["CategoryTreeNodeResponse"] = []
    orphaned: bool = False


class CategoryTreeResponse(BaseModel):
    """Category forest.

    ``truncated`` is set when the page cap was reached, in which case some
    parents may be missing and their children appear as orphaned roots.
    """

    items: list[CategoryTreeNodeResponse]
    total: int
    truncated: bool = False


class CategoryListResponse(BaseModel):
    """Flat category list."""

    items: list[CategoryResponse]
    total: int


CategoryTreeNodeResponse.model_rebuild()
