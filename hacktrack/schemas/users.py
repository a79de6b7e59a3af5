"""Request/response schemas for admin user management."""

from datetime import datetime

from pydantic import Field

from hacktrack.schemas.auth import Role
from hacktrack.schemas.base import CamelModel


class UserInfo(CamelModel):
    """User as exposed outside the credential store (never includes password material)."""

    username: str
    role: Role
    request_admin: bool = False
    created_by: str | None = None
    modified_by: str | None = None
    modified_at: datetime | None = None


class UserCreateRequest(CamelModel):
    username: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=128)
    role: Role = "member"


class UserUpdateRequest(CamelModel):
    """Only password and role are mutable; omitted fields are left unchanged."""

    password: str | None = Field(default=None, max_length=128)
    role: Role | None = None


class UserSummary(CamelModel):
    username: str
    role: Role
