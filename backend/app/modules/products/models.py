"""Product models."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base_model import Base, StringIDMixin, TimestampMixin


class ProductStatus(str, Enum):
    """Product listing status."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    BANNED = "banned"


class Product(Base, StringIDMixin, TimestampMixin):
    """Fixed-price listing sold by a shop."""

    __tablename__ = "products"

    shop_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("shops.id", ondelete="RESTRICT"),
        nullable=False,
    )
    category_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    stock_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=ProductStatus.DRAFT.value,
        nullable=False,
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_products_shop", "shop_id"),
        Index("ix_products_category", "category_id"),
        Index("ix_products_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Product {self.slug} ({self.status})>"
