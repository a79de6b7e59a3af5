"""Client-side session cache: the token/role pair kept between calls.

Transient sessions live in memory for the life of the client. Durable ("remember
me") sessions are written to a JSON file together with a device fingerprint. The
fingerprint is a soft continuity check only: anyone can copy the file and the
server never sees it, so it is not a security boundary.
"""

import hashlib
import json
import logging
import os
import platform
import socket
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path.home() / ".config" / "hacktrack" / "session.json"


class CachedSession(BaseModel):
    token: str
    username: str
    role: str
    expires_at: datetime
    persistent: bool = False
    fingerprint: str = ""

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


def device_fingerprint() -> str:
    """Short hash of platform, hostname and UTC offset."""
    offset = datetime.now().astimezone().utcoffset()
    raw = f"{platform.platform()}|{socket.gethostname()}|{offset}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:8]


class SessionCache(ABC):
    @abstractmethod
    def load(self) -> CachedSession | None: ...

    @abstractmethod
    def save(self, session: CachedSession) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class MemorySessionCache(SessionCache):
    """Transient cache; forgotten when the process exits."""

    def __init__(self) -> None:
        self._session: CachedSession | None = None

    def load(self) -> CachedSession | None:
        return self._session

    def save(self, session: CachedSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionCache(SessionCache):
    """Durable cache in a JSON file readable only by the current user."""

    def __init__(self, path: Path | str = DEFAULT_CACHE_PATH) -> None:
        self.path = Path(path)

    def load(self) -> CachedSession | None:
        if not self.path.exists():
            return None
        try:
            return CachedSession.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError, json.JSONDecodeError):
            logger.warning("Discarding unreadable session cache", extra={"path": str(self.path)})
            self.clear()
            return None

    def save(self, session: CachedSession) -> None:
        """Write owner-only from the first byte, then swap into place."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        tmp.unlink(missing_ok=True)
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(session.model_dump_json())
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
