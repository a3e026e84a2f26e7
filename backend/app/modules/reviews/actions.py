"""Bulk actions for reviews."""

from datetime import datetime
from enum import Enum
from typing import Any

from app.core.bulk import ALL_ROLES, ActionSpec, ActionTable, Mutation, remove, transition
from app.modules.reviews.models import Review, ReviewStatus


class ReviewAction(str, Enum):
    FLAG = "flag"
    APPROVE = "approve"
    REJECT = "reject"
    UNFLAG = "unflag"
    DELETE = "delete"


def flag(timestamp: datetime, data: dict[str, Any]) -> Mutation:
    return Mutation(changes={"is_flagged": True, "flagged_at": timestamp, "updated_at": timestamp})


def unflag(timestamp: datetime, data: dict[str, Any]) -> Mutation:
    return Mutation(changes={"is_flagged": False, "flagged_at": None, "updated_at": timestamp})


REVIEW_ACTIONS: ActionTable[ReviewAction] = ActionTable(
    "reviews",
    Review,
    ReviewAction,
    {
        ReviewAction.FLAG: ActionSpec(flag, roles=ALL_ROLES),
        ReviewAction.APPROVE: ActionSpec(transition(ReviewStatus.APPROVED.value, "approved_at")),
        ReviewAction.REJECT: ActionSpec(transition(ReviewStatus.REJECTED.value, "rejected_at")),
        ReviewAction.UNFLAG: ActionSpec(unflag),
        ReviewAction.DELETE: ActionSpec(remove),
    },
)
