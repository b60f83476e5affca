"""Configuration, database session, security primitives and the error taxonomy."""

from app.core.config import Settings, get_settings, settings
from app.core.database import get_db
from app.core.exceptions import AppError

__all__ = ["AppError", "Settings", "get_settings", "settings", "get_db"]
