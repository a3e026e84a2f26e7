"""API routes for shops."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import BulkExecutor, BulkOperationResponse, parse_bulk_request
from app.core.database import get_db
from app.core.security import Actor, get_current_actor
from app.modules.shops.actions import SHOP_ACTIONS

router = APIRouter()


@router.post(
    "/shops/bulk",
    response_model=BulkOperationResponse,
    summary="Bulk shop actions",
)
async def bulk_shops(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> BulkOperationResponse:
    """Apply one action to many shops.

    Admin only: verify, unverify, activate, deactivate, ban, unban, delete.
    Delete is refused for shops that still have products or auctions.
    """
    request = parse_bulk_request(payload)
    return await BulkExecutor(db, SHOP_ACTIONS).execute(actor, request)
