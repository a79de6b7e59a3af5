"""Login, logout, self-registration and token validation endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from hacktrack.api.deps import get_auth_service, get_bearer_token, get_current_session
from hacktrack.core.errors import UnauthorizedError
from hacktrack.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SessionInfo,
    TokenResponse,
)
from hacktrack.services.auth import AuthService
from hacktrack.services.sessions import UserSession

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns an opaque bearer token.
    Include the token in the Authorization header as: Bearer <token>
    With remember=true the session lasts 30 days instead of 8 hours.
    """
    session = auth.login(body.username, body.password, remember=body.remember)
    return TokenResponse(token=session.token, role=session.role, expires_at=session.expires_at)


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: Annotated[str | None, Depends(get_bearer_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Revoke the presented token. Revoking an unknown or expired token is not an error."""
    if not token:
        raise UnauthorizedError()
    auth.logout(token)
    return MessageResponse(message="Logged out")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> RegisterResponse:
    """Self-service sign-up. New accounts are always members; requestAdmin is only a request."""
    user = auth.register(body.username, body.password, request_admin=body.request_admin)
    return RegisterResponse(
        username=user.username, role=user.role, request_admin=user.request_admin
    )


@router.get("/validate", response_model=SessionInfo)
def validate(
    session: Annotated[UserSession, Depends(get_current_session)],
) -> SessionInfo:
    """Confirm a token is still live without re-sending credentials."""
    return SessionInfo(
        username=session.username, role=session.role, expires_at=session.expires_at
    )
