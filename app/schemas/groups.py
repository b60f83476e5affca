"""Request/response schemas for groups and group membership."""

from datetime import datetime

from pydantic import Field

from app.schemas.auth import RoleRef
from app.schemas.base import CamelModel


class GroupCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class GroupUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None


class GroupOut(CamelModel):
    id: int
    name: str
    description: str | None
    user_count: int
    created_at: datetime
    updated_at: datetime


class GroupMember(CamelModel):
    """Safe member view plus the time the user joined the group."""

    id: int
    name: str
    username: str
    email: str
    role: RoleRef
    created_at: datetime
    joined_at: datetime


class GroupDetail(GroupOut):
    members: list[GroupMember]


class GroupMemberAdd(CamelModel):
    user_id: int
