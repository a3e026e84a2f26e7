"""API routes for auctions."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import BulkExecutor, BulkOperationResponse, parse_bulk_request
from app.core.database import get_db
from app.core.security import Actor, get_current_actor
from app.modules.auctions.actions import AUCTION_ACTIONS

router = APIRouter()


@router.post(
    "/auctions/bulk",
    response_model=BulkOperationResponse,
    summary="Bulk auction actions",
)
async def bulk_auctions(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> BulkOperationResponse:
    """Apply one action to many auctions.

    Seller (own shops only): start, end, cancel, delete.
    Admin: feature, unfeature, approve, reject.
    """
    request = parse_bulk_request(payload)
    return await BulkExecutor(db, AUCTION_ACTIONS).execute(actor, request)
