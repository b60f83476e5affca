"""Role management endpoints (bootstrap role only)."""

from fastapi import APIRouter, status

from app.api.deps import Credentials, SettingsDep, StoreDep, require_caller_id
from app.schemas.base import MessageResponse
from app.schemas.roles import (
    RoleCreate,
    RoleMigrateRequest,
    RoleMigrateResponse,
    RoleOut,
    RoleUpdate,
)
from app.services.roles import RolesService

router = APIRouter()


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreate,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> RoleOut:
    caller_id = require_caller_id(credentials, settings)
    return RolesService(store, settings).create(body, caller_id)


@router.get("", response_model=list[RoleOut])
def list_roles(credentials: Credentials, store: StoreDep, settings: SettingsDep) -> list[RoleOut]:
    caller_id = require_caller_id(credentials, settings)
    return RolesService(store, settings).find_all(caller_id)


@router.post("/migrate", response_model=RoleMigrateResponse)
def migrate_role(
    body: RoleMigrateRequest,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> RoleMigrateResponse:
    """
    Move every user from role `from` to role `to`.
    Use before deleting a role that still has users.
    """
    caller_id = require_caller_id(credentials, settings)
    return RolesService(store, settings).migrate(body.from_role_id, body.to_role_id, caller_id)


@router.get("/{role_id}", response_model=RoleOut)
def get_role(
    role_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> RoleOut:
    caller_id = require_caller_id(credentials, settings)
    return RolesService(store, settings).get(role_id, caller_id)


@router.patch("/{role_id}", response_model=RoleOut)
def update_role(
    role_id: int,
    body: RoleUpdate,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> RoleOut:
    caller_id = require_caller_id(credentials, settings)
    return RolesService(store, settings).update(role_id, body, caller_id)


@router.delete("/{role_id}", response_model=MessageResponse)
def delete_role(
    role_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> MessageResponse:
    """Delete a role that is deletable and has no users."""
    caller_id = require_caller_id(credentials, settings)
    return MessageResponse(message=RolesService(store, settings).delete(role_id, caller_id))
