"""Bulk actions for orders.

Sellers move their own shop's orders through fulfilment (process, ship,
deliver). Confirmation, cancellation, refunds and deletion are admin only.
"""

from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import SELLER_OR_ADMIN, ActionSpec, ActionTable, remove, transition
from app.modules.orders.models import DELETABLE_STATUSES, Order, OrderStatus


class OrderAction(str, Enum):
    PROCESS = "process"
    SHIP = "ship"
    DELIVER = "deliver"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    REFUND = "refund"
    DELETE = "delete"


async def order_is_closed(db: AsyncSession, order: Order) -> str | None:
    if order.status not in DELETABLE_STATUSES:
        return f"Order {order.id} can only be deleted if cancelled or failed"
    return None


def _fulfilment(status: OrderStatus, stamp: str) -> ActionSpec:
    return ActionSpec(transition(status.value, stamp), roles=SELLER_OR_ADMIN, owner_scoped=True)


ORDER_ACTIONS: ActionTable[OrderAction] = ActionTable(
    "orders",
    Order,
    OrderAction,
    {
        OrderAction.PROCESS: _fulfilment(OrderStatus.PROCESSING, "processing_at"),
        OrderAction.SHIP: _fulfilment(OrderStatus.SHIPPED, "shipped_at"),
        OrderAction.DELIVER: _fulfilment(OrderStatus.DELIVERED, "delivered_at"),
        OrderAction.CONFIRM: ActionSpec(transition(OrderStatus.CONFIRMED.value, "confirmed_at")),
        OrderAction.CANCEL: ActionSpec(transition(OrderStatus.CANCELLED.value, "cancelled_at")),
        OrderAction.REFUND: ActionSpec(transition(OrderStatus.REFUNDED.value, "refunded_at")),
        OrderAction.DELETE: ActionSpec(remove, guards=(order_is_closed,)),
    },
)
