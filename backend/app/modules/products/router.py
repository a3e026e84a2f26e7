"""API routes for products."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import BulkExecutor, BulkOperationResponse, parse_bulk_request
from app.core.database import get_db
from app.core.security import Actor, get_current_actor
from app.modules.products.actions import PRODUCT_ACTIONS

router = APIRouter()


@router.post(
    "/products/bulk",
    response_model=BulkOperationResponse,
    summary="Bulk product actions",
)
async def bulk_products(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> BulkOperationResponse:
    """Apply one action to many products.

    Seller (own shops only): publish, unpublish, archive, update-stock
    (``data.stockCount``), delete.
    Admin: the seller actions on any product, plus feature, unfeature,
    ban, verify.
    """
    request = parse_bulk_request(payload)
    return await BulkExecutor(db, PRODUCT_ACTIONS).execute(actor, request)
