"""Authentication service."""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import InvalidCredentialsError
from app.core.logging import get_logger
from app.core.security import create_access_token, verify_password
from app.modules.auth.models import User
from app.modules.auth.schemas import LoginRequest, TokenResponse

logger = get_logger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def authenticate(self, data: LoginRequest) -> tuple[User, TokenResponse]:
        """Check credentials and issue an access token.

        Raises:
            InvalidCredentialsError: unknown email, wrong password or
                disabled account
        """
        result = await self.db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()

        if not user or not verify_password(data.password, user.password_hash):
            logger.info("login_failed", email=data.email)
            raise InvalidCredentialsError()

        if not user.is_active:
            raise InvalidCredentialsError("Account is disabled")

        user.last_login_at = datetime.now(UTC)
        await self.db.commit()

        token = create_access_token(
            {"sub": user.id, "email": user.email, "role": user.role}
        )
        logger.info("login_succeeded", user_id=user.id, role=user.role)

        return user, TokenResponse(
            access_token=token,
            expires_in=settings.jwt_access_token_expire_minutes * 60,
        )
