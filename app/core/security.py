"""Password/token hashing and JWT issuing/verification for authentication."""

import hashlib
import uuid
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt
from pydantic import BaseModel, SecretStr
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings
from app.core.exceptions import AuthenticationError

# Min/max lengths for username and password validation (input validation).
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Same pattern login uses to decide between email and username lookups.
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def hash_password(plain_password: str, rounds: int = 10) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password(uuid.uuid4().hex, rounds=rounds)


def burn_password_check(plain_password: str, rounds: int = 10) -> None:
    """Run a bcrypt comparison that always fails, so unknown users cost as much as wrong passwords."""
    verify_password(plain_password, _dummy_hash(rounds))


def _token_digest(token: str) -> str:
    # JWTs are longer than bcrypt's 72-byte input; hash them down first.
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def hash_token(token: str, rounds: int = 10) -> str:
    """Hash a refresh token for storage at rest."""
    return hash_password(_token_digest(token), rounds=rounds)


def verify_token_hash(token: str, hashed: str) -> bool:
    return verify_password(_token_digest(token), hashed)


class TokenClaims(BaseModel):
    """Identity carried by access and refresh tokens."""

    sub: str
    role: str
    email: str


class TokenIssuer:
    """Signs and verifies one class of JWT (access or refresh) with its own secret and lifetime."""

    def __init__(
        self,
        secret: SecretStr,
        ttl: timedelta,
        algorithm: str = "HS256",
        kind: str = "access",
    ) -> None:
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self.kind = kind

    def sign(self, claims: TokenClaims) -> str:
        """Create a signed token carrying sub, role and email plus iat, exp and jti."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims.model_dump(),
            "iat": now,
            "exp": now + self.ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(
            payload,
            self._secret.get_secret_value(),
            algorithm=self.algorithm,
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate the token; return its claims.
        Raises AuthenticationError on a bad signature, expiry or malformed payload.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret.get_secret_value(),
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(f"Expired {self.kind} token")
        except jwt.PyJWTError:
            raise AuthenticationError(f"Invalid {self.kind} token")
        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError:
            raise AuthenticationError(f"Invalid {self.kind} token payload")


def access_token_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(
        settings.JWT_ACCESS_SECRET,
        settings.access_token_ttl,
        algorithm=settings.JWT_ALGORITHM,
        kind="access",
    )


def refresh_token_issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(
        settings.JWT_REFRESH_SECRET,
        settings.refresh_token_ttl,
        algorithm=settings.JWT_ALGORITHM,
        kind="refresh",
    )


def decode_unverified(token: str) -> dict[str, Any]:
    """
    Return a token's payload without checking signature or expiry.
    For diagnostics only; never authorize anything based on the result.
    """
    return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
