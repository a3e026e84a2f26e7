"""Security utilities - JWT, password hashing, caller resolution."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.exceptions import (
    AdminRequiredError,
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
)
from app.core.logging import bind_context, get_logger

if TYPE_CHECKING:
    from app.modules.auth.models import User

logger = get_logger(__name__)

# HTTP Bearer token scheme
bearer_scheme = HTTPBearer(auto_error=False)


class Role(str, Enum):
    """Marketplace account roles."""

    ADMIN = "admin"
    SELLER = "seller"
    USER = "user"
    GUEST = "guest"


# ============================================================================
# Password Utilities
# ============================================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Bcrypt has a 72 byte limit, so we truncate if necessary.
    """
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8")[:72],
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Malformed stored hash
        return False


# ============================================================================
# JWT Utilities
# ============================================================================


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )

    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": "access",
        "jti": str(uuid4()),
    })

    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()


# ============================================================================
# Caller identity
# ============================================================================


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of one request."""

    id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: "User") -> "Actor":
        try:
            role = Role(user.role)
        except ValueError:
            logger.warning("unknown_user_role", user_id=user.id, role=user.role)
            raise AuthenticationError() from None
        return cls(id=user.id, email=user.email, role=role)


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """Bearer header wins; the session cookie is the browser fallback."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def get_current_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    """Dependency resolving the caller from bearer token or session cookie.

    Raises AuthenticationError if no credentials are present or the user
    no longer exists / is disabled.
    """
    from app.modules.auth.models import User

    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError()

    payload = decode_token(token)
    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidTokenError("Invalid token type")

    stmt = (
        select(User)
        .where(User.id == payload["sub"])
        .where(User.is_active.is_(True))
    )
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError()

    actor = Actor.from_user(user)
    bind_context(actor_id=actor.id, actor_role=actor.role.value)
    return actor


async def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Dependency restricting a route to administrators.

    Usage:
        @router.post("/admin/categories")
        async def create_category(actor: Actor = Depends(require_admin)):
            ...
    """
    if not actor.is_admin:
        raise AdminRequiredError()
    return actor
