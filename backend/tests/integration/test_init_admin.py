"""Tests for the admin bootstrap script."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import verify_password
from app.modules.auth.models import User
from app.scripts.init_admin import ensure_admin

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_creates_admin(db_session: AsyncSession) -> None:
    user, created = await ensure_admin(db_session, "root@example.com", "s3cret-pass")

    assert created is True
    assert user.role == "admin"
    assert verify_password("s3cret-pass", user.password_hash)


@pytest.mark.asyncio
async def test_promotes_existing_user(db_session: AsyncSession, seller_user: User) -> None:
    old_hash = seller_user.password_hash
    seller_user.is_active = False
    await db_session.commit()

    user, created = await ensure_admin(db_session, seller_user.email, "ignored")

    assert created is False
    assert user.id == seller_user.id
    assert user.role == "admin"
    assert user.is_active is True
    assert user.password_hash == old_hash
