"""Credential store: user accounts with bcrypt password hashes, roles and audit metadata.

Password hashes never leave this module; callers only ever see UserInfo.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hacktrack.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    StoreFailureError,
)
from hacktrack.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    verify_password,
)
from hacktrack.models import ROLES, AuditEntry, User
from hacktrack.schemas.users import UserInfo

logger = logging.getLogger(__name__)

AUDIT_USER_DELETE = "user.delete"


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash compared against on unknown usernames so both failure paths cost the same."""
    return hash_password("not-a-real-password")


def validate_username(username: str) -> None:
    if not username or not username.strip():
        raise InvalidInputError("Username is required.")
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise InvalidInputError("Invalid username length.")


def validate_password(password: str) -> None:
    if not password:
        raise InvalidInputError("Password is required.")
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise InvalidInputError("Invalid password length.")


def validate_role(role: str) -> None:
    if role not in ROLES:
        raise InvalidInputError(f"Role must be one of: {', '.join(ROLES)}.")


class UserStore:
    """User CRUD over one SQLAlchemy session. Every write is committed before returning."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User store %s failed", action, exc_info=True)
            raise StoreFailureError(cause=e) from e

    def _get(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_username(self, username: str) -> UserInfo | None:
        """Return the user or None; a miss is not an error."""
        with self._store_errors("lookup"):
            user = self._get(username)
        if user is None:
            return None
        return UserInfo.model_validate(user)

    def authenticate(self, username: str, password: str) -> UserInfo | None:
        """Return the user if the password matches its stored hash, else None."""
        with self._store_errors("lookup"):
            user = self._get(username)
        if user is None:
            verify_password(password, _dummy_hash())
            return None
        if not verify_password(password, user.password_hash):
            return None
        return UserInfo.model_validate(user)

    def create(
        self,
        username: str,
        password: str,
        role: str = "member",
        request_admin: bool = False,
        created_by: str | None = None,
    ) -> UserInfo:
        """Insert a new user. Raises ConflictError if the username is taken."""
        validate_username(username)
        validate_password(password)
        validate_role(role)
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            request_admin=request_admin,
            created_by=created_by or username,
        )
        with self._store_errors("create"):
            self.db.add(user)
            try:
                # The unique index on username makes check-then-insert atomic.
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError(f"Username '{username}' is already taken.") from e
            self.db.refresh(user)
        logger.info(
            "User created",
            extra={"target_username": username, "role": role, "actor": user.created_by},
        )
        return UserInfo.model_validate(user)

    def update(
        self,
        username: str,
        actor: str,
        password: str | None = None,
        role: str | None = None,
    ) -> UserInfo:
        """Change password and/or role. Raises NotFoundError if the user does not exist."""
        if password is not None:
            validate_password(password)
        if role is not None:
            validate_role(role)
        with self._store_errors("update"):
            user = self._get(username)
            if user is None:
                raise NotFoundError(f"User '{username}' not found.")
            if password is not None:
                user.password_hash = hash_password(password)
            if role is not None:
                user.role = role
            user.modified_by = actor
            user.modified_at = datetime.now(UTC)
            self.db.commit()
            self.db.refresh(user)
        logger.info(
            "User updated",
            extra={
                "target_username": username,
                "actor": actor,
                "password_changed": password is not None,
                "role": user.role,
            },
        )
        return UserInfo.model_validate(user)

    def delete(self, username: str, actor: str) -> None:
        """Delete the user and append one audit entry in the same transaction."""
        with self._store_errors("delete"):
            user = self._get(username)
            if user is None:
                raise NotFoundError(f"User '{username}' not found.")
            self.db.delete(user)
            self.db.add(
                AuditEntry(
                    action=AUDIT_USER_DELETE,
                    target_username=username,
                    actor=actor,
                    created_at=datetime.now(UTC),
                )
            )
            self.db.commit()
        logger.info(
            "User deleted",
            extra={"action": AUDIT_USER_DELETE, "target_username": username, "actor": actor},
        )

    def list_all(self) -> list[UserInfo]:
        """All users ordered by creation, without password material."""
        with self._store_errors("list"):
            users = self.db.query(User).order_by(User.id).all()
        return [UserInfo.model_validate(u) for u in users]
