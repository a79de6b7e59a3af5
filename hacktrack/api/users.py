"""Admin-only user management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from hacktrack.api.deps import get_user_store, require_admin
from hacktrack.core.errors import InvalidInputError
from hacktrack.schemas.auth import MessageResponse
from hacktrack.schemas.users import (
    UserCreateRequest,
    UserInfo,
    UserSummary,
    UserUpdateRequest,
)
from hacktrack.services.sessions import UserSession
from hacktrack.services.users import UserStore

router = APIRouter()


@router.get("", response_model=list[UserInfo])
def list_users(
    _admin: Annotated[UserSession, Depends(require_admin)],
    users: Annotated[UserStore, Depends(get_user_store)],
) -> list[UserInfo]:
    """List all users without password material."""
    return users.list_all()


@router.post("", response_model=UserSummary, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    admin: Annotated[UserSession, Depends(require_admin)],
    users: Annotated[UserStore, Depends(get_user_store)],
) -> UserSummary:
    user = users.create(
        username=body.username,
        password=body.password,
        role=body.role,
        created_by=admin.username,
    )
    return UserSummary(username=user.username, role=user.role)


@router.put("/{username}", response_model=UserSummary)
def update_user(
    username: str,
    body: UserUpdateRequest,
    admin: Annotated[UserSession, Depends(require_admin)],
    users: Annotated[UserStore, Depends(get_user_store)],
) -> UserSummary:
    """
    Change a user's password and/or role. Sessions already issued keep the role
    they were issued with until they expire.
    """
    user = users.update(username, actor=admin.username, password=body.password, role=body.role)
    return UserSummary(username=user.username, role=user.role)


@router.delete("/{username}", response_model=MessageResponse)
def delete_user(
    username: str,
    admin: Annotated[UserSession, Depends(require_admin)],
    users: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Delete a user and append an audit entry."""
    if username == admin.username:
        raise InvalidInputError("Admins cannot delete their own account.")
    users.delete(username, actor=admin.username)
    return MessageResponse(message=f"User '{username}' deleted")
