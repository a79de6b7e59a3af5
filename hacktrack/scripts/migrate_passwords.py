"""
One-time offline migration: replace plaintext passwords left in the users table
with bcrypt hashes. The request path never accepts plaintext, so run this before
starting the app against an old database:

  python -m hacktrack.scripts.migrate_passwords [--dry-run]
"""

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hacktrack.core.database import SessionLocal
from hacktrack.core.security import hash_password, is_password_hash
from hacktrack.models import User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def migrate_plaintext_passwords(session: Session, dry_run: bool = False) -> int:
    """
    Hash every password_hash that is not already a bcrypt hash.
    Returns how many rows needed migrating. Idempotent: safe to run repeatedly.
    """
    migrated = 0
    for user in session.query(User).order_by(User.id).all():
        if is_password_hash(user.password_hash):
            continue
        migrated += 1
        if not dry_run:
            user.password_hash = hash_password(user.password_hash)
        logger.info("Plaintext password found", extra={"username": user.username})
    if dry_run:
        session.rollback()
    else:
        session.commit()
    return migrated


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Hash plaintext passwords in the users table.")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would change")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        migrated = migrate_plaintext_passwords(db, dry_run=args.dry_run)
        logger.info("Password migration completed: migrated=%s dry_run=%s", migrated, args.dry_run)
        return 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Password migration failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
