"""Auction models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base_model import Base, StringIDMixin, TimestampMixin


class AuctionStatus(str, Enum):
    """Auction lifecycle.

    draft -> scheduled -> live -> ended; scheduled/live -> cancelled;
    moderation may move any auction to rejected.
    """

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    LIVE = "live"
    ENDED = "ended"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class Auction(Base, StringIDMixin, TimestampMixin):
    """Timed auction run by a shop."""

    __tablename__ = "auctions"

    shop_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("shops.id", ondelete="RESTRICT"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    starting_bid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    current_bid: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=AuctionStatus.DRAFT.value,
        nullable=False,
    )
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_auctions_shop", "shop_id"),
        Index("ix_auctions_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Auction {self.id} ({self.status})>"
