"""Group and membership endpoints with row-level security."""

from fastapi import APIRouter, status

from app.api.deps import Credentials, SettingsDep, StoreDep, require_caller_id
from app.schemas.base import MessageResponse
from app.schemas.groups import (
    GroupCreate,
    GroupDetail,
    GroupMember,
    GroupMemberAdd,
    GroupOut,
    GroupUpdate,
)
from app.services.groups import GroupsService

router = APIRouter()


@router.post("", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(
    body: GroupCreate,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> GroupOut:
    caller_id = require_caller_id(credentials, settings)
    return GroupsService(store).create(body, caller_id)


@router.get("", response_model=list[GroupOut])
def list_groups(credentials: Credentials, store: StoreDep, settings: SettingsDep) -> list[GroupOut]:
    """Staff see every group; other users see the groups they belong to."""
    caller_id = require_caller_id(credentials, settings)
    return GroupsService(store).find_all(caller_id)


@router.get("/{group_id}", response_model=GroupDetail)
def get_group(
    group_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> GroupDetail:
    caller_id = require_caller_id(credentials, settings)
    return GroupsService(store).get(group_id, caller_id)


@router.patch("/{group_id}", response_model=GroupOut)
def update_group(
    group_id: int,
    body: GroupUpdate,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> GroupOut:
    caller_id = require_caller_id(credentials, settings)
    return GroupsService(store).update(group_id, body, caller_id)


@router.delete("/{group_id}", response_model=MessageResponse)
def delete_group(
    group_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> MessageResponse:
    caller_id = require_caller_id(credentials, settings)
    return MessageResponse(message=GroupsService(store).delete(group_id, caller_id))


@router.get("/{group_id}/users", response_model=list[GroupMember])
def list_group_users(
    group_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> list[GroupMember]:
    """Members of a group with their join time; members of the group and staff only."""
    caller_id = require_caller_id(credentials, settings)
    return GroupsService(store).members(group_id, caller_id)


@router.post(
    "/{group_id}/users",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_group_user(
    group_id: int,
    body: GroupMemberAdd,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> MessageResponse:
    caller_id = require_caller_id(credentials, settings)
    return MessageResponse(
        message=GroupsService(store).add_member(group_id, body.user_id, caller_id)
    )


@router.delete("/{group_id}/users/{user_id}", response_model=MessageResponse)
def remove_group_user(
    group_id: int,
    user_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> MessageResponse:
    caller_id = require_caller_id(credentials, settings)
    return MessageResponse(
        message=GroupsService(store).remove_member(group_id, user_id, caller_id)
    )
