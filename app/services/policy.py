"""
Two-tier access policy for users and groups.

Staff (role.staff_status) may read and write every user and group. Everyone
else may read/update only their own user record and read only the groups they
belong to. Role management is reserved for the bootstrap role.
"""

from dataclasses import dataclass

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.services.store import Store


@dataclass(frozen=True)
class Actor:
    """Caller identity resolved from the store, not from token claims."""

    user_id: int
    role_name: str
    is_staff: bool


def resolve_actor(store: Store, user_id: int) -> Actor:
    """Look up the caller's current role; an unknown caller is not authenticated."""
    user = store.get_user(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return Actor(
        user_id=user.id,
        role_name=user.role.name,
        is_staff=bool(user.role.staff_status),
    )


def can_access_user(actor: Actor, target_user_id: int) -> bool:
    return actor.is_staff or actor.user_id == target_user_id


def can_read_group(actor: Actor, is_member: bool) -> bool:
    return actor.is_staff or is_member


def ensure_staff(actor: Actor, action: str) -> None:
    if not actor.is_staff:
        raise AuthorizationError(f"Only staff users can {action}")


def ensure_user_access(actor: Actor, target_user_id: int, action: str = "access") -> None:
    if not can_access_user(actor, target_user_id):
        raise AuthorizationError(f"You do not have permission to {action} this user")


def ensure_group_read(store: Store, actor: Actor, group_id: int, what: str = "group") -> None:
    # Membership is only consulted for non-staff callers.
    if actor.is_staff:
        return
    if not can_read_group(actor, store.is_member(actor.user_id, group_id)):
        raise AuthorizationError(f"You do not have permission to view this {what}")


def ensure_bootstrap_role(actor: Actor, bootstrap_role_name: str) -> None:
    if actor.role_name != bootstrap_role_name:
        raise AuthorizationError(f"Only {bootstrap_role_name} users can manage roles")
