"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.group import Group, GroupMembership
from app.models.role import Role
from app.models.user import User

__all__ = ["Base", "Group", "GroupMembership", "Role", "User"]
