"""Role lifecycle management, restricted to bootstrap-role callers."""

import logging

from app.core.config import Settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Role
from app.schemas.roles import RoleCreate, RoleMigrateResponse, RoleOut, RoleUpdate
from app.services.policy import ensure_bootstrap_role, resolve_actor
from app.services.store import Store

logger = logging.getLogger(__name__)


class RolesService:
    def __init__(self, store: Store, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    def _authorize(self, requester_id: int) -> None:
        actor = resolve_actor(self.store, requester_id)
        ensure_bootstrap_role(actor, self.settings.BOOTSTRAP_ROLE_NAME)

    def _get_or_404(self, role_id: int) -> Role:
        role = self.store.get_role(role_id)
        if role is None:
            raise NotFoundError(f'Role with id "{role_id}" not found')
        return role

    def create(self, data: RoleCreate, requester_id: int) -> RoleOut:
        self._authorize(requester_id)
        if self.store.find_role_by_name(data.name) is not None:
            raise ConflictError(f'Role "{data.name}" already exists')

        role = Role(
            name=data.name,
            description=data.description,
            is_deletable=True,
            staff_status=data.staff_status,
        )
        self.store.add(role)
        self.store.commit(f'Role "{data.name}" already exists')
        self.store.refresh(role)
        logger.info("Role created", extra={"role_id": role.id, "role": role.name})
        return self.store.role_view(role)

    def find_all(self, requester_id: int) -> list[RoleOut]:
        self._authorize(requester_id)
        return [self.store.role_view(r) for r in self.store.list_roles()]

    def get(self, role_id: int, requester_id: int) -> RoleOut:
        self._authorize(requester_id)
        return self.store.role_view(self._get_or_404(role_id))

    def update(self, role_id: int, data: RoleUpdate, requester_id: int) -> RoleOut:
        self._authorize(requester_id)
        role = self._get_or_404(role_id)
        if data.name is not None and data.name != role.name:
            if self.store.find_role_by_name(data.name) is not None:
                raise ConflictError(f'Role "{data.name}" already exists')

        # The bootstrap role must stay findable by name and keep staff status.
        if role.name == self.settings.BOOTSTRAP_ROLE_NAME:
            if data.name is not None and data.name != role.name:
                raise ValidationError(f'Role "{role.name}" cannot be renamed')
            if data.staff_status is False:
                raise ValidationError(f'Role "{role.name}" must keep staff status')

        if data.name is not None:
            role.name = data.name
        if data.description is not None:
            role.description = data.description
        if data.staff_status is not None:
            role.staff_status = data.staff_status
        self.store.commit(f'Role "{data.name}" already exists')
        self.store.refresh(role)
        return self.store.role_view(role)

    def delete(self, role_id: int, requester_id: int) -> str:
        """Delete a deletable role that no user references."""
        self._authorize(requester_id)
        role = self._get_or_404(role_id)
        if not role.is_deletable:
            raise ValidationError(f'Role "{role.name}" cannot be deleted (protected by the system)')
        user_count = self.store.count_users_with_role(role.id)
        if user_count > 0:
            raise ConflictError(
                f'Cannot delete role "{role.name}": {user_count} user(s) still hold it. '
                "Use /roles/migrate to move them first."
            )

        name = role.name
        self.store.delete(role)
        self.store.commit(f'Role "{name}" is still referenced')
        logger.info("Role deleted", extra={"role_id": role_id, "role": name})
        return f'Role "{name}" deleted'

    def migrate(self, from_role_id: int, to_role_id: int, requester_id: int) -> RoleMigrateResponse:
        """Reassign every user holding one role to another; reports how many moved."""
        self._authorize(requester_id)
        if from_role_id == to_role_id:
            raise ValidationError("Source and target roles must be different")
        from_role = self._get_or_404(from_role_id)
        to_role = self._get_or_404(to_role_id)
        from_name, to_name = from_role.name, to_role.name
        if from_name == self.settings.BOOTSTRAP_ROLE_NAME:
            raise ValidationError(f'Users cannot be migrated away from role "{from_name}"')

        if self.store.count_users_with_role(from_role.id) == 0:
            raise ValidationError(f'Role "{from_name}" has no users to migrate')

        moved = self.store.reassign_role(from_role.id, to_role.id)
        logger.info(
            "Role users migrated",
            extra={"from_role": from_name, "to_role": to_name, "users_migrated": moved},
        )
        return RoleMigrateResponse(
            message=f'{moved} user(s) migrated from "{from_name}" to "{to_name}"',
            from_role=from_name,
            to_role=to_name,
            users_migrated=moved,
        )
