"""Domain error taxonomy and its mapping to HTTP responses.

Services raise these; routes let them propagate and the handler registered in
app.main renders them as ``{"detail": ..., "code": ...}``. The message text is
for humans; clients should branch on ``code``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that surface to the HTTP boundary."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or inconsistent input (e.g. password confirmation mismatch)."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    """Bad credentials, or a missing, malformed or expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class AuthorizationError(AppError):
    """Authenticated, but the caller lacks the privilege for this operation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(AppError):
    """Uniqueness violation, or a deletion blocked by existing references."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class ConfigurationError(AppError):
    """Required seed data is missing (e.g. the bootstrap role)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "CONFIGURATION_ERROR"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as a JSON body with the error's status code."""
    if isinstance(exc, ConfigurationError):
        logger.error(
            "Server misconfiguration",
            extra={"path": request.url.path, "reason": exc.message[:500]},
        )
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
