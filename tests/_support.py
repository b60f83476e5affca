"""Shared test helpers: in-memory SQLite database, fast settings, seeded users."""

from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.database import build_engine
from app.core.security import hash_password
from app.models import Base, Role, User
from app.services.seed import seed_roles

PASSWORD = "secret123"


def make_settings(**overrides: object) -> Settings:
    """Settings with cheap bcrypt and fixed secrets; ignores any local .env file."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "BCRYPT_ROUNDS": 4,
        "JWT_ACCESS_SECRET": "test-access-secret-0123456789abcdef",
        "JWT_REFRESH_SECRET": "test-refresh-secret-0123456789abcdef",
        "REFRESH_ROTATE_ON_USE": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_session_factory() -> sessionmaker:
    """One shared in-memory database for every session the factory makes."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    session: Session,
    username: str,
    role_name: str,
    password: str = PASSWORD,
) -> User:
    """Insert a user holding the named role directly, bypassing the services."""
    role = session.query(Role).filter(Role.name == role_name).one()
    user = User(
        name=username.title(),
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password, rounds=4),
        role_id=role.id,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def seeded_session(settings: Settings) -> Session:
    session = make_session_factory()()
    seed_roles(session, settings)
    return session
