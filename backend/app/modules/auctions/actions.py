"""Bulk actions for auctions.

Seller actions move an auction through its lifecycle and are checked
against the current status of every auction before anything is written.
"""

from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import (
    SELLER_OR_ADMIN,
    ActionSpec,
    ActionTable,
    Guard,
    remove,
    set_fields,
    transition,
)
from app.modules.auctions.models import Auction, AuctionStatus


class AuctionAction(str, Enum):
    START = "start"
    END = "end"
    CANCEL = "cancel"
    DELETE = "delete"
    FEATURE = "feature"
    UNFEATURE = "unfeature"
    APPROVE = "approve"
    REJECT = "reject"


def requires_status(*allowed: AuctionStatus, message: str) -> Guard:
    """Guard passing only auctions currently in one of ``allowed``."""
    values = {status.value for status in allowed}

    async def guard(db: AsyncSession, auction: Auction) -> str | None:
        if auction.status not in values:
            return f"Auction {auction.id}: {message}"
        return None

    return guard


AUCTION_ACTIONS: ActionTable[AuctionAction] = ActionTable(
    "auctions",
    Auction,
    AuctionAction,
    {
        AuctionAction.START: ActionSpec(
            transition(AuctionStatus.LIVE.value, "start_time"),
            roles=SELLER_OR_ADMIN,
            owner_scoped=True,
            guards=(
                requires_status(
                    AuctionStatus.SCHEDULED,
                    message="Only scheduled auctions can be started",
                ),
            ),
        ),
        AuctionAction.END: ActionSpec(
            transition(AuctionStatus.ENDED.value, "end_time"),
            roles=SELLER_OR_ADMIN,
            owner_scoped=True,
            guards=(
                requires_status(AuctionStatus.LIVE, message="Only live auctions can be ended"),
            ),
        ),
        AuctionAction.CANCEL: ActionSpec(
            transition(AuctionStatus.CANCELLED.value),
            roles=SELLER_OR_ADMIN,
            owner_scoped=True,
            guards=(
                requires_status(
                    AuctionStatus.SCHEDULED,
                    AuctionStatus.LIVE,
                    message="Can only cancel scheduled or live auctions",
                ),
            ),
        ),
        AuctionAction.DELETE: ActionSpec(
            remove,
            roles=SELLER_OR_ADMIN,
            owner_scoped=True,
            guards=(
                requires_status(
                    AuctionStatus.DRAFT,
                    AuctionStatus.ENDED,
                    AuctionStatus.CANCELLED,
                    message="Can only delete draft, ended, or cancelled auctions",
                ),
            ),
        ),
        AuctionAction.FEATURE: ActionSpec(set_fields(is_featured=True)),
        AuctionAction.UNFEATURE: ActionSpec(set_fields(is_featured=False)),
        AuctionAction.APPROVE: ActionSpec(set_fields(is_approved=True)),
        AuctionAction.REJECT: ActionSpec(
            transition(AuctionStatus.REJECTED.value, is_approved=False)
        ),
    },
)
