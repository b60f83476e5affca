"""Request/response schemas for role management."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class RoleCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    staff_status: bool = False


class RoleUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    staff_status: bool | None = None


class RoleOut(CamelModel):
    id: int
    name: str
    description: str | None
    is_deletable: bool
    staff_status: bool
    user_count: int
    created_at: datetime
    updated_at: datetime


class RoleMigrateRequest(CamelModel):
    """Move every user holding role `from` to role `to`."""

    from_role_id: int = Field(..., alias="from")
    to_role_id: int = Field(..., alias="to")


class RoleMigrateResponse(CamelModel):
    message: str
    from_role: str = Field(..., alias="from")
    to_role: str = Field(..., alias="to")
    users_migrated: int
