"""Pydantic request/response schemas."""

from hacktrack.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    Role,
    SessionInfo,
    TokenResponse,
)
from hacktrack.schemas.hackathons import HackathonFields, HackathonRecord
from hacktrack.schemas.health import HealthResponse
from hacktrack.schemas.users import (
    UserCreateRequest,
    UserInfo,
    UserSummary,
    UserUpdateRequest,
)

__all__ = [
    "HackathonFields",
    "HackathonRecord",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "Role",
    "SessionInfo",
    "TokenResponse",
    "UserCreateRequest",
    "UserInfo",
    "UserSummary",
    "UserUpdateRequest",
]
