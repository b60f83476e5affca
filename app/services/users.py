"""User CRUD with row-level security."""

import logging

from app.core.config import Settings
from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.security import hash_password
from app.models import User
from app.schemas.auth import SafeUser
from app.schemas.users import UserCreate, UserUpdate
from app.services.policy import ensure_staff, ensure_user_access, resolve_actor
from app.services.store import Store

logger = logging.getLogger(__name__)


class UsersService:
    """
    Staff see and edit every user; everyone else only themselves.
    Creating and deleting users is staff-only, and nobody can delete themselves.
    """

    def __init__(self, store: Store, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    def _get_or_404(self, user_id: int) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _check_unique(self, email: str | None, username: str | None) -> None:
        if email is not None and self.store.find_user_by_email(email) is not None:
            raise ConflictError("Email already registered")
        if username is not None and self.store.find_user_by_username(username) is not None:
            raise ConflictError("Username already registered")

    def create(self, data: UserCreate, requester_id: int) -> SafeUser:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "create users")
        self._check_unique(data.email, data.username)
        role = self.store.get_role(data.role_id)
        if role is None:
            raise NotFoundError("Role not found")

        user = User(
            name=data.name,
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password, rounds=self.settings.BCRYPT_ROUNDS),
            role_id=role.id,
        )
        self.store.add(user)
        self.store.commit("Email or username already registered")
        self.store.refresh(user)
        logger.info(
            "User created",
            extra={"user_id": user.id, "role": role.name, "requester_id": requester_id},
        )
        return self.store.safe_user(user)

    def find_all(self, requester_id: int) -> list[SafeUser]:
        """Staff get every user (newest first); others get exactly their own record."""
        actor = resolve_actor(self.store, requester_id)
        if actor.is_staff:
            return [self.store.safe_user(u) for u in self.store.list_users()]
        return [self.store.safe_user(self._get_or_404(actor.user_id))]

    def get(self, user_id: int, requester_id: int) -> SafeUser:
        actor = resolve_actor(self.store, requester_id)
        ensure_user_access(actor, user_id, "view")
        return self.store.safe_user(self._get_or_404(user_id))

    def update(self, user_id: int, data: UserUpdate, requester_id: int) -> SafeUser:
        actor = resolve_actor(self.store, requester_id)
        ensure_user_access(actor, user_id, "edit")
        user = self._get_or_404(user_id)

        if data.role_id is not None and data.role_id != user.role_id:
            if not actor.is_staff:
                raise AuthorizationError("Only staff users can change roles")
            if self.store.get_role(data.role_id) is None:
                raise NotFoundError("Role not found")
        self._check_unique(
            data.email if data.email is not None and data.email != user.email else None,
            data.username
            if data.username is not None and data.username != user.username
            else None,
        )

        if data.name is not None:
            user.name = data.name
        if data.username is not None:
            user.username = data.username
        if data.email is not None:
            user.email = data.email
        if data.role_id is not None:
            user.role_id = data.role_id
        if data.password is not None:
            user.password_hash = hash_password(
                data.password, rounds=self.settings.BCRYPT_ROUNDS
            )
        self.store.commit("Email or username already registered")
        self.store.refresh(user)
        return self.store.safe_user(user)

    def delete(self, user_id: int, requester_id: int) -> str:
        actor = resolve_actor(self.store, requester_id)
        ensure_staff(actor, "delete users")
        user = self._get_or_404(user_id)
        if actor.user_id == user.id:
            raise ValidationError("You cannot delete yourself")

        name = user.name
        self.store.delete(user)
        self.store.commit()
        logger.info("User deleted", extra={"user_id": user_id, "requester_id": requester_id})
        return f'User "{name}" removed'
