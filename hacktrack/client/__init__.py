"""Python client for the tracker API and its local session cache."""

from hacktrack.client.api import ApiError, TrackerClient
from hacktrack.client.session_cache import (
    CachedSession,
    FileSessionCache,
    MemorySessionCache,
    SessionCache,
    device_fingerprint,
)

__all__ = [
    "ApiError",
    "CachedSession",
    "FileSessionCache",
    "MemorySessionCache",
    "SessionCache",
    "TrackerClient",
    "device_fingerprint",
]
