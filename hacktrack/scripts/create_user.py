"""
Create a user (e.g. the first admin; self-registration only creates members). Run from project root:
  python -m hacktrack.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m hacktrack.scripts.create_user admin your-secure-password admin
"""
import argparse
import sys

from hacktrack.core.database import SessionLocal
from hacktrack.core.errors import TrackerError
from hacktrack.models import ROLES
from hacktrack.services.users import UserStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a tracker user with an explicit role.")
    parser.add_argument("username", help="Username (1-255 chars, case-sensitive)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("role", nargs="?", default="member", choices=ROLES)
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = UserStore(db).create(
            username=args.username,
            password=args.password,
            role=args.role,
            created_by="cli",
        )
    except TrackerError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
