"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import Field

from app.core.security import (
    EMAIL_PATTERN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """New account details; confirmPassword must equal password."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN, description="Email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    confirm_password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password confirmation",
    )


class LoginRequest(CamelModel):
    """Credentials for login; identifier is an email or a username."""

    identifier: str = Field(..., min_length=1, max_length=320, description="Email or username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RefreshRequest(CamelModel):
    """Optional body carrier for the refresh token (a Bearer header also works)."""

    refresh_token: str | None = Field(default=None, description="JWT refresh token")


class RoleRef(CamelModel):
    id: int
    name: str


class SafeUser(CamelModel):
    """User view with credential material removed."""

    id: int
    name: str
    username: str
    email: str
    role: RoleRef
    created_at: datetime
    updated_at: datetime


class RegisterResponse(CamelModel):
    user: SafeUser


class LoginResponse(CamelModel):
    """Tokens returned after successful login."""

    user: SafeUser
    role: str
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")


class RefreshResponse(CamelModel):
    """New access token; refreshToken is present only when rotation on use is enabled."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str | None = Field(default=None, description="Rotated JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
