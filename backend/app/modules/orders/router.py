"""API routes for orders."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import BulkExecutor, BulkOperationResponse, parse_bulk_request
from app.core.database import get_db
from app.core.security import Actor, get_current_actor
from app.modules.orders.actions import ORDER_ACTIONS

router = APIRouter()


@router.post(
    "/orders/bulk",
    response_model=BulkOperationResponse,
    summary="Bulk order actions",
)
async def bulk_orders(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> BulkOperationResponse:
    """Apply one action to many orders.

    Seller (own shops only): process, ship, deliver.
    Admin: the seller actions on any order, plus confirm, cancel, refund
    and delete (cancelled or failed orders only).
    """
    request = parse_bulk_request(payload)
    return await BulkExecutor(db, ORDER_ACTIONS).execute(actor, request)
