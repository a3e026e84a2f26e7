"""Category models."""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base_model import Base, SortOrderMixin, StringIDMixin, TimestampMixin


class Category(Base, StringIDMixin, TimestampMixin, SortOrderMixin):
    """Product category. ``parent_id`` links it into the category tree."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)

    parent_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
    )

    # Seller-created categories wait for moderation
    created_by: Mapped[str] = mapped_column(String(20), default="admin", nullable=False)
    needs_review: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )

    __table_args__ = (Index("ix_categories_parent", "parent_id"),)

    def __repr__(self) -> str:
        return f"<Category {self.slug}>"
