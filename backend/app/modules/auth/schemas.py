"""Pydantic schemas for authentication."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import Role


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Access token issued on login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")


class MeResponse(BaseModel):
    """Current caller."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: Role
