"""Auth service: login, self-registration, token validation and role checks."""

import logging
import math
import threading
from collections.abc import Callable, Collection
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from hacktrack.core.errors import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    TooManyAttemptsError,
    UnauthorizedError,
)
from hacktrack.schemas.users import UserInfo
from hacktrack.services.sessions import SessionRegistry, UserSession, utc_now
from hacktrack.services.users import UserStore

if TYPE_CHECKING:
    from hacktrack.core.config import Settings

logger = logging.getLogger(__name__)

SELF_REGISTERED_ROLE = "member"


@dataclass
class _Attempts:
    first_failure_at: datetime
    failures: int = 0
    locked_until: datetime | None = None

    def is_stale(self, now: datetime, window: timedelta) -> bool:
        if self.locked_until is not None:
            return self.locked_until <= now
        return now - self.first_failure_at >= window


class LoginThrottle:
    """
    Per-username failed-login counter. Each attempt is reserved under the lock before the
    password is checked, so concurrent guesses share one budget. After max_attempts
    attempts within the lockout window the username is locked for lockout; unknown
    usernames are counted like real ones. Entries older than the window are pruned.
    max_attempts=0 disables throttling.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        lockout: timedelta = timedelta(seconds=30),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.max_attempts = max_attempts
        self.lockout = lockout
        self.clock = clock
        self._attempts: dict[str, _Attempts] = {}
        self._lock = threading.Lock()
        self._next_prune: datetime | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LoginThrottle":
        return cls(
            max_attempts=settings.LOGIN_MAX_ATTEMPTS,
            lockout=timedelta(seconds=settings.LOGIN_LOCKOUT_SECONDS),
        )

    @property
    def enabled(self) -> bool:
        return self.max_attempts > 0

    def __len__(self) -> int:
        return len(self._attempts)

    def _prune(self, now: datetime) -> None:
        # Caller holds the lock. Full scans run at most once per lockout window.
        if self._next_prune is not None and now < self._next_prune:
            return
        for username in [u for u, e in self._attempts.items() if e.is_stale(now, self.lockout)]:
            del self._attempts[username]
        self._next_prune = now + self.lockout

    def _locked_error(self, locked_until: datetime, now: datetime) -> TooManyAttemptsError:
        remaining = max(1, math.ceil((locked_until - now).total_seconds()))
        return TooManyAttemptsError(
            f"Too many failed attempts. Try again in {remaining}s.",
            retry_after=remaining,
        )

    def acquire(self, username: str) -> None:
        """
        Reserve one attempt for username or raise TooManyAttemptsError while it is locked.
        The reservation counts as a failure until reset() is called on success.
        """
        if not self.enabled:
            return
        now = self.clock()
        with self._lock:
            self._prune(now)
            entry = self._attempts.get(username)
            if entry is not None and entry.is_stale(now, self.lockout):
                del self._attempts[username]
                entry = None
            if entry is not None and entry.locked_until is not None:
                raise self._locked_error(entry.locked_until, now)
            if entry is None:
                entry = self._attempts[username] = _Attempts(first_failure_at=now)
            entry.failures += 1
            if entry.failures < self.max_attempts:
                return
            entry.locked_until = now + self.lockout
        logger.warning(
            "Login attempts exhausted, username locked",
            extra={"username": username, "lockout_seconds": int(self.lockout.total_seconds())},
        )

    def reset(self, username: str) -> None:
        with self._lock:
            self._attempts.pop(username, None)


def validate_token(sessions: SessionRegistry, token: str | None) -> UserSession:
    """Resolve a bearer token to its live session or raise Unauthorized/SessionExpired."""
    if not token or not token.strip():
        raise UnauthorizedError()
    return sessions.resolve(token.strip())


def check_role(session: UserSession, required_roles: Collection[str]) -> UserSession:
    """
    Raise ForbiddenError unless the session role is in required_roles.
    An empty set only requires authentication. Roles are flat: admin does not imply editor.
    """
    if required_roles and session.role not in required_roles:
        logger.info(
            "Forbidden: role not permitted",
            extra={"username": session.username, "role": session.role},
        )
        raise ForbiddenError()
    return session


class AuthService:
    """Ties the credential store to the session registry."""

    def __init__(
        self,
        users: UserStore,
        sessions: SessionRegistry,
        throttle: LoginThrottle | None = None,
    ) -> None:
        self.users = users
        self.sessions = sessions
        self.throttle = throttle if throttle is not None else LoginThrottle(max_attempts=0)

    def login(self, username: str, password: str, remember: bool = False) -> UserSession:
        """
        Verify credentials and issue a session (long-lived when remember is set).
        Unknown user and wrong password fail identically with InvalidCredentialsError.
        """
        if not username or not password:
            raise InvalidInputError("Username and password are required.")
        self.throttle.acquire(username)
        user = self.users.authenticate(username, password)
        if user is None:
            logger.warning("Login failed", extra={"username": username})
            raise InvalidCredentialsError()
        self.throttle.reset(username)
        session = self.sessions.issue(user.username, user.role, persistent=remember)
        logger.info(
            "Login succeeded",
            extra={"username": user.username, "role": user.role, "persistent": remember},
        )
        return session

    def register(self, username: str, password: str, request_admin: bool = False) -> UserInfo:
        """Create a member account; request_admin is stored as an advisory flag only."""
        user = self.users.create(
            username=username,
            password=password,
            role=SELF_REGISTERED_ROLE,
            request_admin=request_admin,
            created_by=username,
        )
        if request_admin:
            logger.info("Registration requested admin access", extra={"username": username})
        return user

    def validate(self, token: str | None) -> UserSession:
        return validate_token(self.sessions, token)

    def logout(self, token: str) -> None:
        self.sessions.revoke(token)

    def authorize(self, token: str | None, required_roles: Collection[str]) -> UserSession:
        return check_role(self.validate(token), required_roles)
