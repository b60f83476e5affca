"""User endpoints. Staff see everyone; other users only themselves."""

from fastapi import APIRouter, status

from app.api.deps import Credentials, SettingsDep, StoreDep, require_caller_id
from app.schemas.auth import SafeUser
from app.schemas.base import MessageResponse
from app.schemas.users import UserCreate, UserUpdate
from app.services.users import UsersService

router = APIRouter()


@router.post("", response_model=SafeUser, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> SafeUser:
    """Create a user with the given role (staff only)."""
    caller_id = require_caller_id(credentials, settings)
    return UsersService(store, settings).create(body, caller_id)


@router.get("", response_model=list[SafeUser])
def list_users(credentials: Credentials, store: StoreDep, settings: SettingsDep) -> list[SafeUser]:
    """List users: all of them for staff, just the caller otherwise."""
    caller_id = require_caller_id(credentials, settings)
    return UsersService(store, settings).find_all(caller_id)


@router.get("/{user_id}", response_model=SafeUser)
def get_user(
    user_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> SafeUser:
    caller_id = require_caller_id(credentials, settings)
    return UsersService(store, settings).get(user_id, caller_id)


@router.patch("/{user_id}", response_model=SafeUser)
def update_user(
    user_id: int,
    body: UserUpdate,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> SafeUser:
    """Update a user; non-staff callers may only update themselves and cannot change roles."""
    caller_id = require_caller_id(credentials, settings)
    return UsersService(store, settings).update(user_id, body, caller_id)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    credentials: Credentials,
    store: StoreDep,
    settings: SettingsDep,
) -> MessageResponse:
    """Remove a user (staff only; never yourself)."""
    caller_id = require_caller_id(credentials, settings)
    return MessageResponse(message=UsersService(store, settings).delete(user_id, caller_id))
