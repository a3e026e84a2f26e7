"""API routes for reviews."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import BulkExecutor, BulkOperationResponse, parse_bulk_request
from app.core.database import get_db
from app.core.security import Actor, get_current_actor
from app.modules.reviews.actions import REVIEW_ACTIONS

router = APIRouter()


@router.post(
    "/reviews/bulk",
    response_model=BulkOperationResponse,
    summary="Bulk review actions",
)
async def bulk_reviews(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> BulkOperationResponse:
    """Apply one action to many reviews.

    Any signed-in user: flag.
    Admin: approve, reject, unflag, delete.
    """
    request = parse_bulk_request(payload)
    return await BulkExecutor(db, REVIEW_ACTIONS).execute(actor, request)
