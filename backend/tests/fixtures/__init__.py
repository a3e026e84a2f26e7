"""Test fixtures and factories."""

from tests.fixtures.factories import (
    AuctionFactory,
    CategoryFactory,
    OrderFactory,
    ProductFactory,
    ReviewFactory,
    ShopFactory,
    UserFactory,
)

__all__ = [
    "AuctionFactory",
    "CategoryFactory",
    "OrderFactory",
    "ProductFactory",
    "ReviewFactory",
    "ShopFactory",
    "UserFactory",
]
