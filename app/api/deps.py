"""Request-scoped building blocks shared by route handlers.

Handlers verify the bearer token themselves as their first statement
(``caller_id = require_caller_id(credentials, settings)``) and then call a
service, which applies the access policy. Nothing here makes authorization
decisions on its own.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError
from app.core.security import TokenClaims, access_token_issuer
from app.services.store import Store

bearer = HTTPBearer(auto_error=False)


def get_store(db: Annotated[Session, Depends(get_db)]) -> Store:
    """Dependency: a Store bound to this request's session."""
    return Store(db)


Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)]
StoreDep = Annotated[Store, Depends(get_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def require_access_token(
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> TokenClaims:
    """Verify the Bearer access token and return its claims. Raises AuthenticationError."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return access_token_issuer(settings).verify(credentials.credentials)


def subject_id(claims: TokenClaims) -> int:
    try:
        return int(claims.sub)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")


def require_caller_id(
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> int:
    """Verify the access token and return the caller's user id."""
    return subject_id(require_access_token(credentials, settings))
