"""Session registry: opaque bearer tokens mapped to (username, role, expiry).

Sessions live in an injected SessionStore. The default InMemorySessionStore is
process-local, so every session is lost on restart; a shared backend only has
to implement the SessionStore methods.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hacktrack.core.errors import SessionExpiredError, UnauthorizedError
from hacktrack.core.security import generate_token

if TYPE_CHECKING:
    from hacktrack.core.config import Settings

logger = logging.getLogger(__name__)

# Token collisions are retried at most this many times.
MAX_TOKEN_ATTEMPTS = 5

# issue() evicts expired sessions at most this often.
SWEEP_INTERVAL = timedelta(minutes=15)


class UserSession(BaseModel):
    """One issued bearer token. role is a snapshot taken at login."""

    model_config = ConfigDict(frozen=True)

    token: str
    username: str
    role: str
    expires_at: datetime
    persistent: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class SessionStore(ABC):
    """Concurrency-safe key-value storage for sessions, keyed by token."""

    @abstractmethod
    def add(self, session: UserSession) -> bool:
        """Insert session unless its token is already present. Returns False on collision."""

    @abstractmethod
    def get(self, token: str) -> UserSession | None: ...

    @abstractmethod
    def pop(self, token: str) -> UserSession | None:
        """Remove and return the session; None if absent."""

    @abstractmethod
    def values(self) -> list[UserSession]: ...

    @abstractmethod
    def __len__(self) -> int: ...


class InMemorySessionStore(SessionStore):
    """Dict guarded by a lock; safe to share between request threads."""

    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}
        self._lock = threading.Lock()

    def add(self, session: UserSession) -> bool:
        with self._lock:
            if session.token in self._sessions:
                return False
            self._sessions[session.token] = session
            return True

    def get(self, token: str) -> UserSession | None:
        with self._lock:
            return self._sessions.get(token)

    def pop(self, token: str) -> UserSession | None:
        with self._lock:
            return self._sessions.pop(token, None)

    def values(self) -> list[UserSession]:
        with self._lock:
            return list(self._sessions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def utc_now() -> datetime:
    return datetime.now(UTC)


class SessionRegistry:
    """Issues, resolves and revokes sessions with lazy expiry."""

    def __init__(
        self,
        store: SessionStore | None = None,
        ttl: timedelta = timedelta(hours=8),
        remember_ttl: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store if store is not None else InMemorySessionStore()
        self.ttl = ttl
        self.remember_ttl = remember_ttl
        self.clock = clock
        self._next_sweep: datetime | None = None

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        store: SessionStore | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> "SessionRegistry":
        return cls(
            store=store,
            ttl=timedelta(hours=settings.SESSION_TTL_HOURS),
            remember_ttl=timedelta(days=settings.SESSION_REMEMBER_DAYS),
            clock=clock,
        )

    def issue(self, username: str, role: str, persistent: bool = False) -> UserSession:
        """Create and store a new session; lifetime depends on persistent (remember me)."""
        now = self.clock()
        if self._next_sweep is None or now >= self._next_sweep:
            self._next_sweep = now + SWEEP_INTERVAL
            self.sweep()
        expires_at = now + (self.remember_ttl if persistent else self.ttl)
        for _ in range(MAX_TOKEN_ATTEMPTS):
            session = UserSession(
                token=generate_token(),
                username=username,
                role=role,
                expires_at=expires_at,
                persistent=persistent,
            )
            if self.store.add(session):
                return session
        raise RuntimeError("Could not generate a unique session token")

    def resolve(self, token: str) -> UserSession:
        """
        Return the live session for token.
        Raises UnauthorizedError if unknown, SessionExpiredError if expired (the session is evicted).
        """
        session = self.store.get(token)
        if session is None:
            raise UnauthorizedError("Invalid or unknown token")
        if session.is_expired(self.clock()):
            self.store.pop(token)
            logger.info(
                "Session expired and evicted",
                extra={"username": session.username, "expires_at": session.expires_at.isoformat()},
            )
            raise SessionExpiredError()
        return session

    def lookup(self, token: str) -> UserSession | None:
        """Like resolve, but returns None instead of raising."""
        try:
            return self.resolve(token)
        except UnauthorizedError:
            return None

    def revoke(self, token: str) -> None:
        """Remove the session. Idempotent."""
        self.store.pop(token)

    def sweep(self) -> int:
        """Evict every expired session; returns how many were removed."""
        now = self.clock()
        removed = 0
        for session in self.store.values():
            if session.is_expired(now) and self.store.pop(session.token) is not None:
                removed += 1
        if removed:
            logger.info("Swept expired sessions", extra={"sessions_removed": removed})
        return removed

    def active_count(self) -> int:
        """Number of live sessions; expired ones are swept first."""
        self.sweep()
        return len(self.store)

    def __len__(self) -> int:
        return len(self.store)
