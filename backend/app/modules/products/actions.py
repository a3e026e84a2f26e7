"""Bulk actions for products.

Sellers manage the lifecycle and stock of their own shop's products;
administrators moderate (feature, ban, verify) and may delete any product.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from app.core.bulk import (
    SELLER_OR_ADMIN,
    ActionSpec,
    ActionTable,
    Mutation,
    remove,
    set_fields,
)
from app.core.exceptions import ValidationError
from app.modules.products.models import Product, ProductStatus


class ProductAction(str, Enum):
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    ARCHIVE = "archive"
    UPDATE_STOCK = "update-stock"
    DELETE = "delete"
    FEATURE = "feature"
    UNFEATURE = "unfeature"
    BAN = "ban"
    VERIFY = "verify"


def update_stock(timestamp: datetime, data: dict[str, Any]) -> Mutation:
    """Set ``stock_count`` from ``data.stockCount`` (missing means 0)."""
    raw = data.get("stockCount", 0)
    try:
        stock_count = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            "stockCount must be an integer",
            errors=[{"field": "data.stockCount", "value": str(raw)}],
        ) from None
    if isinstance(raw, float) and not raw.is_integer():
        raise ValidationError(
            "stockCount must be an integer",
            errors=[{"field": "data.stockCount", "value": str(raw)}],
        )
    if isinstance(raw, bool) or stock_count < 0:
        raise ValidationError(
            "stockCount must be a non-negative integer",
            errors=[{"field": "data.stockCount", "value": str(raw)}],
        )
    return Mutation(changes={"stock_count": stock_count, "updated_at": timestamp})


def _seller(recipe: Any) -> ActionSpec:
    return ActionSpec(recipe, roles=SELLER_OR_ADMIN, owner_scoped=True)


PRODUCT_ACTIONS: ActionTable[ProductAction] = ActionTable(
    "products",
    Product,
    ProductAction,
    {
        ProductAction.PUBLISH: _seller(set_fields(status=ProductStatus.PUBLISHED.value)),
        ProductAction.UNPUBLISH: _seller(set_fields(status=ProductStatus.DRAFT.value)),
        ProductAction.ARCHIVE: _seller(set_fields(status=ProductStatus.ARCHIVED.value)),
        ProductAction.UPDATE_STOCK: _seller(update_stock),
        ProductAction.DELETE: _seller(remove),
        ProductAction.FEATURE: ActionSpec(set_fields(is_featured=True)),
        ProductAction.UNFEATURE: ActionSpec(set_fields(is_featured=False)),
        ProductAction.BAN: ActionSpec(set_fields(status=ProductStatus.BANNED.value)),
        ProductAction.VERIFY: ActionSpec(set_fields(is_verified=True)),
    },
)
