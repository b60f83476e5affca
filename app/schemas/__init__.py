"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    RoleRef,
    SafeUser,
)
from app.schemas.base import CamelModel, MessageResponse
from app.schemas.groups import (
    GroupCreate,
    GroupDetail,
    GroupMember,
    GroupMemberAdd,
    GroupOut,
    GroupUpdate,
)
from app.schemas.health import HealthResponse
from app.schemas.roles import (
    RoleCreate,
    RoleMigrateRequest,
    RoleMigrateResponse,
    RoleOut,
    RoleUpdate,
)
from app.schemas.users import UserCreate, UserUpdate

__all__ = [
    "CamelModel",
    "GroupCreate",
    "GroupDetail",
    "GroupMember",
    "GroupMemberAdd",
    "GroupOut",
    "GroupUpdate",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "RegisterResponse",
    "RoleCreate",
    "RoleMigrateRequest",
    "RoleMigrateResponse",
    "RoleOut",
    "RoleRef",
    "RoleUpdate",
    "SafeUser",
    "UserCreate",
    "UserUpdate",
]
