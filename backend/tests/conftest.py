"""Pytest configuration and fixtures.

Tests run against an in-memory SQLite database created from the ORM
metadata, so no PostgreSQL instance is needed.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.base_model import Base
from app.core.database import get_db
from app.core.security import Role, hash_password
from app.main import create_app
from app.modules.auctions.models import Auction  # noqa: F401
from app.modules.auth.models import User
from app.modules.categories.models import Category  # noqa: F401
from app.modules.orders.models import Order  # noqa: F401
from app.modules.products.models import Product  # noqa: F401
from app.modules.reviews.models import Review  # noqa: F401
from app.modules.shops.models import Shop
from tests.fixtures.auth import TEST_USER_PASSWORD, bearer
from tests.fixtures.factories import ShopFactory, UserFactory

TEST_DATABASE_URL = "sqlite+aiosqlite://"

Persist = Callable[..., Awaitable[list[Any]]]


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[Any, None]:
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def persist(db_session: AsyncSession) -> Persist:
    """Insert objects, commit, and reload server defaults."""

    async def _persist(*objects: Any) -> list[Any]:
        db_session.add_all(objects)
        await db_session.commit()
        for obj in objects:
            await db_session.refresh(obj)
        return list(objects)

    return _persist


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def app(db_session: AsyncSession) -> FastAPI:
    """Create test FastAPI application."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application.dependency_overrides[get_db] = override_get_db

    return application


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ============================================================================
# Account Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def admin_user(persist: Persist) -> User:
    user = UserFactory(
        role=Role.ADMIN.value,
        password_hash=hash_password(TEST_USER_PASSWORD),
    )
    await persist(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def seller_user(persist: Persist) -> User:
    user = UserFactory(
        role=Role.SELLER.value,
        password_hash=hash_password(TEST_USER_PASSWORD),
    )
    await persist(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def other_seller(persist: Persist) -> User:
    user = UserFactory(role=Role.SELLER.value)
    await persist(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def buyer_user(persist: Persist) -> User:
    user = UserFactory(role=Role.USER.value)
    await persist(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def seller_shop(persist: Persist, seller_user: User) -> Shop:
    """Shop owned by ``seller_user``."""
    shop = ShopFactory(owner_id=seller_user.id)
    await persist(shop)
    return shop


@pytest_asyncio.fixture(scope="function")
async def other_shop(persist: Persist, other_seller: User) -> Shop:
    """Shop owned by someone other than ``seller_user``."""
    shop = ShopFactory(owner_id=other_seller.id)
    await persist(shop)
    return shop


# ============================================================================
# Authentication Fixtures
# ============================================================================


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def seller_headers(seller_user: User) -> dict[str, str]:
    return bearer(seller_user)


@pytest.fixture
def buyer_headers(buyer_user: User) -> dict[str, str]:
    return bearer(buyer_user)


@pytest_asyncio.fixture(scope="function")
async def admin_client(
    app: FastAPI,
    admin_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Create authenticated HTTP client for an administrator."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=admin_headers,
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def seller_client(
    app: FastAPI,
    seller_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Create authenticated HTTP client for ``seller_user``."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=seller_headers,
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def buyer_client(
    app: FastAPI,
    buyer_headers: dict[str, str],
) -> AsyncGenerator[AsyncClient, None]:
    """Create authenticated HTTP client for a plain buyer account."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=buyer_headers,
    ) as ac:
        yield ac
