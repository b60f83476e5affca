"""Seed data: the bootstrap, admin and default roles, plus an optional first bootstrap user."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models import Role, User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "ADMIN"


def _seed_role_attrs(settings: "Settings") -> list[dict]:
    return [
        {
            "name": settings.BOOTSTRAP_ROLE_NAME,
            "description": "Main system role; cannot be deleted",
            "is_deletable": False,
            "staff_status": True,
        },
        {
            "name": ADMIN_ROLE_NAME,
            "description": "System administrator",
            "is_deletable": True,
            "staff_status": True,
        },
        {
            "name": settings.DEFAULT_ROLE_NAME,
            "description": "Regular user; sees only their own data",
            "is_deletable": True,
            "staff_status": False,
        },
    ]


def seed_roles(session: Session, settings: "Settings") -> dict[str, Role]:
    """
    Create the seed roles that do not exist yet. Existing roles are left untouched.

    Returns the seed roles keyed by name. Idempotent: safe to run repeatedly.
    """
    roles: dict[str, Role] = {}
    created = 0
    for attrs in _seed_role_attrs(settings):
        role = session.query(Role).filter(Role.name == attrs["name"]).first()
        if role is None:
            role = Role(**attrs)
            session.add(role)
            created += 1
        roles[attrs["name"]] = role
    session.commit()
    if created:
        logger.info("Seed roles created: count=%s", created)
    return roles


def seed_bootstrap_user(
    session: Session,
    settings: "Settings",
    *,
    name: str,
    username: str,
    email: str,
    password: str,
) -> User | None:
    """Create the first bootstrap-role user unless one with this email or username exists."""
    existing = (
        session.query(User)
        .filter((User.email == email) | (User.username == username))
        .first()
    )
    if existing is not None:
        logger.info("Bootstrap user already exists; nothing to do.")
        return None
    role = session.query(Role).filter(Role.name == settings.BOOTSTRAP_ROLE_NAME).one()
    user = User(
        name=name,
        username=username,
        email=email,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        role_id=role.id,
    )
    session.add(user)
    session.commit()
    logger.info("Bootstrap user created: user_id=%s role=%s", user.id, role.name)
    return user
