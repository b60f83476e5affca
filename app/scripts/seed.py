"""
Seed the roles the API needs (and optionally the first bootstrap user). Run from project root:
  python -m app.scripts.seed
  python -m app.scripts.seed --master-email admin@example.com --master-username admin \
      --master-name "Admin" --master-password your-secure-password
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.services.seed import seed_bootstrap_user, seed_roles

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed roles and the first bootstrap user.")
    parser.add_argument("--master-email", help="Email of the first bootstrap-role user")
    parser.add_argument("--master-username", help="Username of the first bootstrap-role user")
    parser.add_argument("--master-name", default="Administrator", help="Display name")
    parser.add_argument("--master-password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    user_args = (args.master_email, args.master_username, args.master_password)
    if any(user_args) and not all(user_args):
        print(
            "--master-email, --master-username and --master-password go together.",
            file=sys.stderr,
        )
        return 1
    if args.master_password and not (
        PASSWORD_MIN_LEN <= len(args.master_password) <= PASSWORD_MAX_LEN
    ):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        roles = seed_roles(db, settings)
        print(f"Roles present: {', '.join(sorted(roles))}.")
        if all(user_args):
            user = seed_bootstrap_user(
                db,
                settings,
                name=args.master_name.strip(),
                username=args.master_username.strip(),
                email=args.master_email.strip(),
                password=args.master_password,
            )
            if user is None:
                print("User already exists, nothing done.")
            else:
                print(f"Created user '{user.username}' with role '{settings.BOOTSTRAP_ROLE_NAME}'.")
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
