"""Registration, login, refresh and logout: the token lifecycle for user accounts."""

import logging
import re

from app.core.config import Settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.security import (
    EMAIL_PATTERN,
    TokenClaims,
    access_token_issuer,
    burn_password_check,
    hash_password,
    hash_token,
    refresh_token_issuer,
    verify_password,
    verify_token_hash,
)
from app.models import User
from app.schemas.auth import LoginResponse, RefreshResponse, RegisterRequest, SafeUser
from app.services.store import Store

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(EMAIL_PATTERN)

INVALID_CREDENTIALS = "Invalid credentials"


def is_email(identifier: str) -> bool:
    """True when the login identifier should be looked up as an email rather than a username."""
    return _EMAIL_RE.match(identifier) is not None


def claims_for(user: User) -> TokenClaims:
    return TokenClaims(sub=str(user.id), role=user.role.name, email=user.email)


class AuthService:
    """Token lifecycle over an injected store."""

    def __init__(self, store: Store, settings: Settings) -> None:
        self.store = store
        self.settings = settings
        self.access_tokens = access_token_issuer(settings)
        self.refresh_tokens = refresh_token_issuer(settings)

    def register(
        self,
        data: RegisterRequest,
        requester_role_name: str | None = None,
    ) -> SafeUser:
        """
        Create an account.

        The very first account needs no caller and gets the bootstrap role;
        afterwards only bootstrap-role callers may register, and new accounts
        get the default role.
        """
        if data.password != data.confirm_password:
            raise ValidationError("Passwords do not match")
        if self.store.find_user_by_email(data.email) is not None:
            raise ConflictError("Email already exists")
        if self.store.find_user_by_username(data.username) is not None:
            raise ConflictError("Username already exists")

        bootstrap = self.settings.BOOTSTRAP_ROLE_NAME
        if self.store.count_users() == 0:
            role = self.store.find_role_by_name(bootstrap)
            if role is None:
                raise ConfigurationError(f"Role {bootstrap} not found. Run the seed first.")
        else:
            if requester_role_name != bootstrap:
                raise AuthorizationError(f"Only {bootstrap} users can register new users")
            role = self.store.find_role_by_name(self.settings.DEFAULT_ROLE_NAME)
            if role is None:
                raise ConfigurationError(f"Role {self.settings.DEFAULT_ROLE_NAME} not found")

        user = User(
            name=data.name,
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password, rounds=self.settings.BCRYPT_ROUNDS),
            role_id=role.id,
        )
        self.store.add(user)
        self.store.commit("Email or username already exists")
        self.store.refresh(user)
        logger.info("User registered", extra={"user_id": user.id, "role": role.name})
        return self.store.safe_user(user)

    def _find_by_identifier(self, identifier: str) -> User | None:
        if is_email(identifier):
            return self.store.find_user_by_email(identifier)
        return self.store.find_user_by_username(identifier)

    def login(self, identifier: str, password: str) -> LoginResponse:
        """Verify credentials and issue an access/refresh token pair."""
        rounds = self.settings.BCRYPT_ROUNDS
        user = self._find_by_identifier(identifier)
        if user is None:
            burn_password_check(password, rounds=rounds)
            logger.info("Login failed", extra={"reason": "unknown_identifier"})
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            logger.info("Login failed", extra={"reason": "bad_password", "user_id": user.id})
            raise AuthenticationError(INVALID_CREDENTIALS)

        claims = claims_for(user)
        access_token = self.access_tokens.sign(claims)
        refresh_token = self.refresh_tokens.sign(claims)
        # Only the hash is persisted; it replaces any previous session.
        self.store.set_refresh_token_hash(user.id, hash_token(refresh_token, rounds=rounds))
        self.store.refresh(user)
        logger.info("Login succeeded", extra={"user_id": user.id, "role": claims.role})
        return LoginResponse(
            user=self.store.safe_user(user),
            role=claims.role,
            access_token=access_token,
            refresh_token=refresh_token,
        )

    def refresh(self, user_id: int, provided_token: str) -> RefreshResponse:
        """
        Mint a new access token from a refresh token that matches the stored hash.

        With REFRESH_ROTATE_ON_USE the refresh token is replaced as well and the
        presented one stops working.
        """
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not user.refresh_token_hash or not verify_token_hash(
            provided_token, user.refresh_token_hash
        ):
            logger.info("Refresh rejected", extra={"user_id": user_id})
            raise AuthenticationError("Invalid refresh token")

        claims = claims_for(user)
        access_token = self.access_tokens.sign(claims)
        rotated: str | None = None
        if self.settings.REFRESH_ROTATE_ON_USE:
            rotated = self.refresh_tokens.sign(claims)
            self.store.set_refresh_token_hash(
                user.id, hash_token(rotated, rounds=self.settings.BCRYPT_ROUNDS)
            )
        logger.info("Access token refreshed", extra={"user_id": user.id, "rotated": rotated is not None})
        return RefreshResponse(access_token=access_token, refresh_token=rotated)

    def logout(self, user_id: int) -> None:
        """Forget the stored refresh-token hash. Safe to call repeatedly."""
        self.store.set_refresh_token_hash(user_id, None)
        logger.info("User logged out", extra={"user_id": user_id})
