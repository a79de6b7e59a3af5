"""Request/response schemas for login, registration and token validation."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from hacktrack.schemas.base import CamelModel

Role = Literal["admin", "editor", "member"]


class LoginRequest(CamelModel):
    """Credentials for login. Empty fields are rejected by the auth service."""

    username: str = Field(default="", max_length=255, description="Username")
    password: str = Field(default="", max_length=128, description="Password")
    remember: bool = Field(
        default=False,
        description="Issue a long-lived (remember me) session instead of the default one",
    )


class TokenResponse(CamelModel):
    """Opaque bearer token returned after successful login."""

    token: str = Field(..., description="Send as Authorization: Bearer <token>")
    role: Role
    expires_at: datetime


class RegisterRequest(CamelModel):
    """Self-service registration; the new account is always a member."""

    username: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=128)
    request_admin: bool = Field(
        default=False,
        description="Advisory request for elevated privileges; grants nothing by itself",
    )


class RegisterResponse(CamelModel):
    username: str
    role: Role
    request_admin: bool


class SessionInfo(CamelModel):
    """Identity attached to a live bearer token (role as snapshotted at login)."""

    username: str
    role: Role
    expires_at: datetime


class MessageResponse(CamelModel):
    message: str
