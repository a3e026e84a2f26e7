"""Bulk actions for shops (admin only)."""

from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.bulk import ActionSpec, ActionTable, remove, set_fields
from app.modules.auctions.models import Auction
from app.modules.orders.models import Order
from app.modules.products.models import Product
from app.modules.shops.models import Shop


class ShopAction(str, Enum):
    VERIFY = "verify"
    UNVERIFY = "unverify"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    BAN = "ban"
    UNBAN = "unban"
    DELETE = "delete"


BAN_REASON = "Bulk ban action"


async def shop_has_no_products(db: AsyncSession, shop: Shop) -> str | None:
    result = await db.execute(select(Product.id).where(Product.shop_id == shop.id).limit(1))
    if result.first() is not None:
        return f"Shop {shop.id} has products"
    return None


async def shop_has_no_auctions(db: AsyncSession, shop: Shop) -> str | None:
    result = await db.execute(select(Auction.id).where(Auction.shop_id == shop.id).limit(1))
    if result.first() is not None:
        return f"Shop {shop.id} has auctions"
    return None


async def shop_has_no_orders(db: AsyncSession, shop: Shop) -> str | None:
    result = await db.execute(select(Order.id).where(Order.shop_id == shop.id).limit(1))
    if result.first() is not None:
        return f"Shop {shop.id} has orders"
    return None


SHOP_ACTIONS: ActionTable[ShopAction] = ActionTable(
    "shops",
    Shop,
    ShopAction,
    {
        ShopAction.VERIFY: ActionSpec(set_fields(is_verified=True)),
        ShopAction.UNVERIFY: ActionSpec(set_fields(is_verified=False)),
        ShopAction.ACTIVATE: ActionSpec(set_fields(is_active=True, is_banned=False)),
        ShopAction.DEACTIVATE: ActionSpec(set_fields(is_active=False)),
        ShopAction.BAN: ActionSpec(
            set_fields(is_banned=True, is_active=False, ban_reason=BAN_REASON)
        ),
        ShopAction.UNBAN: ActionSpec(set_fields(is_banned=False, ban_reason=None)),
        ShopAction.DELETE: ActionSpec(
            remove,
            guards=(shop_has_no_products, shop_has_no_auctions, shop_has_no_orders),
        ),
    },
    owner_field="id",
)
