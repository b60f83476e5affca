"""Storage capability passed to every service: queries, commits and safe projections."""

import logging
from typing import NoReturn

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import Executable

from app.core.exceptions import ConflictError
from app.models import Group, GroupMembership, Role, User
from app.schemas.auth import RoleRef, SafeUser
from app.schemas.groups import GroupMember, GroupOut
from app.schemas.roles import RoleOut

logger = logging.getLogger(__name__)


class Store:
    """
    Thin wrapper over a SQLAlchemy session.

    Services receive one at construction; it is the only place that sees
    password and refresh-token hashes leave the ORM, and it never lets them
    out: every user-facing view is built by ``safe_user`` / ``group_member``.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # --- unit of work -----------------------------------------------------

    def add(self, obj: object) -> None:
        self.session.add(obj)

    def delete(self, obj: object) -> None:
        self.session.delete(obj)

    def commit(self, conflict_message: str = "Resource already exists") -> None:
        """Commit; a unique-constraint violation (e.g. a lost race) becomes ConflictError."""
        try:
            self.session.commit()
        except IntegrityError as e:
            self._reject(e, conflict_message)

    def _execute_and_commit(self, statement: Executable, conflict_message: str) -> int:
        """Run a bulk statement and commit it as one unit; returns the affected row count."""
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except IntegrityError as e:
            self._reject(e, conflict_message)
        return result.rowcount or 0

    def _reject(self, error: IntegrityError, conflict_message: str) -> NoReturn:
        self.session.rollback()
        logger.warning(
            "Commit rejected by constraint",
            extra={"reason": str(error.orig)[:300] if error.orig else "integrity error"},
        )
        raise ConflictError(conflict_message) from error

    def refresh(self, obj: object) -> None:
        self.session.refresh(obj)

    # --- users ------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_user_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def find_user_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def count_users(self) -> int:
        return self.session.query(func.count(User.id)).scalar() or 0

    def list_users(self) -> list[User]:
        return (
            self.session.query(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def set_refresh_token_hash(self, user_id: int, token_hash: str | None) -> int:
        """Replace the stored refresh-token hash; returns the number of rows touched."""
        return self._execute_and_commit(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token_hash=token_hash)
            .execution_options(synchronize_session="fetch"),
            "Refresh token could not be stored",
        )

    # --- roles ------------------------------------------------------------

    def get_role(self, role_id: int) -> Role | None:
        return self.session.get(Role, role_id)

    def find_role_by_name(self, name: str) -> Role | None:
        return self.session.query(Role).filter(Role.name == name).first()

    def list_roles(self) -> list[Role]:
        return self.session.query(Role).order_by(Role.created_at.asc(), Role.id.asc()).all()

    def count_users_with_role(self, role_id: int) -> int:
        return (
            self.session.query(func.count(User.id)).filter(User.role_id == role_id).scalar()
            or 0
        )

    def reassign_role(self, from_role_id: int, to_role_id: int) -> int:
        """Move every user from one role to another in a single statement; returns count moved."""
        return self._execute_and_commit(
            update(User)
            .where(User.role_id == from_role_id)
            .values(role_id=to_role_id)
            .execution_options(synchronize_session="fetch"),
            "Users could not be moved to the target role",
        )

    # --- groups -----------------------------------------------------------

    def get_group(self, group_id: int) -> Group | None:
        return self.session.get(Group, group_id)

    def find_group_by_name(self, name: str) -> Group | None:
        return self.session.query(Group).filter(Group.name == name).first()

    def list_groups(self) -> list[Group]:
        return (
            self.session.query(Group)
            .order_by(Group.created_at.desc(), Group.id.desc())
            .all()
        )

    def list_groups_for_user(self, user_id: int) -> list[Group]:
        return (
            self.session.query(Group)
            .join(GroupMembership, GroupMembership.group_id == Group.id)
            .filter(GroupMembership.user_id == user_id)
            .order_by(Group.created_at.desc(), Group.id.desc())
            .all()
        )

    def count_group_members(self, group_id: int) -> int:
        return (
            self.session.query(func.count(GroupMembership.id))
            .filter(GroupMembership.group_id == group_id)
            .scalar()
            or 0
        )

    def get_membership(self, user_id: int, group_id: int) -> GroupMembership | None:
        return (
            self.session.query(GroupMembership)
            .filter(GroupMembership.user_id == user_id, GroupMembership.group_id == group_id)
            .first()
        )

    def is_member(self, user_id: int, group_id: int) -> bool:
        return self.get_membership(user_id, group_id) is not None

    def list_memberships(self, group_id: int) -> list[GroupMembership]:
        return (
            self.session.query(GroupMembership)
            .filter(GroupMembership.group_id == group_id)
            .order_by(GroupMembership.created_at.asc(), GroupMembership.id.asc())
            .all()
        )

    # --- projections ------------------------------------------------------

    @staticmethod
    def safe_user(user: User) -> SafeUser:
        return SafeUser(
            id=user.id,
            name=user.name,
            username=user.username,
            email=user.email,
            role=RoleRef(id=user.role.id, name=user.role.name),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    def group_member(membership: GroupMembership) -> GroupMember:
        user = membership.user
        return GroupMember(
            id=user.id,
            name=user.name,
            username=user.username,
            email=user.email,
            role=RoleRef(id=user.role.id, name=user.role.name),
            created_at=user.created_at,
            joined_at=membership.created_at,
        )

    def group_view(self, group: Group) -> GroupOut:
        return GroupOut(
            id=group.id,
            name=group.name,
            description=group.description,
            user_count=self.count_group_members(group.id),
            created_at=group.created_at,
            updated_at=group.updated_at,
        )

    def role_view(self, role: Role) -> RoleOut:
        return RoleOut(
            id=role.id,
            name=role.name,
            description=role.description,
            is_deletable=role.is_deletable,
            staff_status=role.staff_status,
            user_count=self.count_users_with_role(role.id),
            created_at=role.created_at,
            updated_at=role.updated_at,
        )
