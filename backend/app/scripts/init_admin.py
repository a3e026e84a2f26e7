"""Create the first administrator account.

Usage:
    python -m app.scripts.init_admin [--email EMAIL] [--password PASSWORD]

Running it again is safe: an existing account with the same email is
promoted to admin and re-activated, its password is left alone.
"""

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_context
from app.core.security import Role, hash_password
from app.modules.auth.models import User


async def ensure_admin(db: AsyncSession, email: str, password: str) -> tuple[User, bool]:
    """Create or promote the admin account.

    Returns:
        Tuple of (user, created)
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is not None:
        user.role = Role.ADMIN.value
        user.is_active = True
        await db.commit()
        return user, False

    user = User(
        email=email,
        password_hash=hash_password(password),
        display_name="Administrator",
        role=Role.ADMIN.value,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user, True


async def main(email: str, password: str) -> None:
    print("=" * 60)
    print("🚀 Initializing admin account")
    print("=" * 60)

    try:
        async with get_db_context() as db:
            user, created = await ensure_admin(db, email, password)
    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    if created:
        print(f"  ✅ Created admin user: {user.email}")
        print("  ⚠️  Change the password after first login!")
    else:
        print(f"  ⏭️  User already exists, ensured admin role: {user.email}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first administrator account")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default="admin123")
    args = parser.parse_args()
    asyncio.run(main(args.email, args.password))
