"""API routes for authentication."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.security import Actor, get_current_actor
from app.modules.auth.schemas import LoginRequest, MeResponse, TokenResponse
from app.modules.auth.service import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Authenticate with email and password. Also sets the session cookie.",
)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Authenticate user and return an access token."""
    service = AuthService(db)
    _, token = await service.authenticate(data)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token.access_token,
        max_age=token.expires_in,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return token


@router.post("/logout", status_code=204, summary="Logout")
async def logout(response: Response) -> None:
    """Clear the session cookie."""
    response.delete_cookie(settings.session_cookie_name)


@router.get("/me", response_model=MeResponse, summary="Current user")
async def me(actor: Actor = Depends(get_current_actor)) -> MeResponse:
    """Return the authenticated caller."""
    return MeResponse(id=actor.id, email=actor.email, role=actor.role)
