"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def engine_options(url: str) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    Pool sizing only applies to server databases; SQLite (local runs and
    tests) uses SQLAlchemy's default pool for the driver.
    """
    options: dict[str, Any] = {"echo": settings.database_echo}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# Objects stay loaded after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request.

    Usage:
        @router.post("/orders/bulk")
        async def bulk_orders(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Session for code running outside a request (scripts)."""
    async with async_session_factory() as session:
        yield session


async def check_db_connection() -> bool:
    """True when ``SELECT 1`` succeeds. Used by startup and readiness checks."""
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, TimeoutError) as exc:
        logger.warning("database_unreachable", error=str(exc))
        return False
    return True


async def close_db() -> None:
    """Dispose of the connection pool on shutdown."""
    await engine.dispose()
