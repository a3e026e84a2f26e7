"""Base SQLAlchemy models with common mixins."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


def generate_id() -> str:
    """New opaque record id (32 hex chars)."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class StringIDMixin:
    """Mixin that adds an opaque string primary key.

    Ids are strings on the wire; keeping them as strings in the database
    means bulk requests can be matched without conversion.
    """

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=generate_id,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SortOrderMixin:
    """Mixin for manual ordering of records."""

    sort_order: Mapped[int] = mapped_column(
        default=0,
        nullable=False,
        index=True,
    )
