"""Register, login, refresh and logout endpoints."""

from fastapi import APIRouter, status

from app.api.deps import (
    Credentials,
    SettingsDep,
    StoreDep,
    require_caller_id,
    subject_id,
)
from app.core.exceptions import AuthenticationError
from app.core.security import refresh_token_issuer
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
)
from app.schemas.base import MessageResponse
from app.services.auth import AuthService
from app.services.policy import ensure_bootstrap_role, resolve_actor

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> RegisterResponse:
    """
    Create an account.

    The first account on a fresh system needs no token and becomes the bootstrap
    role. After that, a Bearer access token of a bootstrap-role user is required.
    """
    requester_role: str | None = None
    if credentials is not None:
        caller_id = require_caller_id(credentials, settings)
        requester_role = resolve_actor(store, caller_id).role_name
    user = AuthService(store, settings).register(body, requester_role)
    return RegisterResponse(user=user)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, store: StoreDep, settings: SettingsDep) -> LoginResponse:
    """
    Authenticate with email or username and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    return AuthService(store, settings).login(body.identifier, body.password)


@router.post("/refresh", response_model=RefreshResponse, response_model_exclude_none=True)
def refresh(
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
    body: RefreshRequest | None = None,
) -> RefreshResponse:
    """Exchange a refresh token (body field refreshToken, or Bearer header) for a new access token."""
    token = body.refresh_token if body is not None else None
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise AuthenticationError("Refresh token missing")
    claims = refresh_token_issuer(settings).verify(token)
    return AuthService(store, settings).refresh(subject_id(claims), token)


@router.post("/logout", response_model=MessageResponse)
def logout(credentials: Credentials, store: StoreDep, settings: SettingsDep) -> MessageResponse:
    """Invalidate the caller's refresh token. Calling it again is harmless."""
    caller_id = require_caller_id(credentials, settings)
    AuthService(store, settings).logout(caller_id)
    return MessageResponse(message="ok")


@router.get("/me/master-check")
def master_check(credentials: Credentials, store: StoreDep, settings: SettingsDep) -> dict[str, bool]:
    """Succeeds only for bootstrap-role callers; handy for checking a token's privileges."""
    caller_id = require_caller_id(credentials, settings)
    ensure_bootstrap_role(resolve_actor(store, caller_id), settings.BOOTSTRAP_ROLE_NAME)
    return {"ok": True}
