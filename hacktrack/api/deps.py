"""Shared FastAPI dependencies: stores, the session registry and the role guard."""

from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hacktrack.core.config import get_settings
from hacktrack.core.database import get_db
from hacktrack.services.auth import AuthService, LoginThrottle, check_role, validate_token
from hacktrack.services.hackathons import HackathonStore
from hacktrack.services.sessions import SessionRegistry, UserSession
from hacktrack.services.users import UserStore

# auto_error=False so a missing/malformed header reaches validate_token and gets our 401 body.
security = HTTPBearer(auto_error=False)


@lru_cache
def get_session_registry() -> SessionRegistry:
    """Process-wide session registry (override in tests or to plug in a shared store)."""
    return SessionRegistry.from_settings(get_settings())


@lru_cache
def get_login_throttle() -> LoginThrottle:
    return LoginThrottle.from_settings(get_settings())


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_hackathon_store(db: Annotated[Session, Depends(get_db)]) -> HackathonStore:
    return HackathonStore(db)


def get_auth_service(
    users: Annotated[UserStore, Depends(get_user_store)],
    sessions: Annotated[SessionRegistry, Depends(get_session_registry)],
    throttle: Annotated[LoginThrottle, Depends(get_login_throttle)],
) -> AuthService:
    return AuthService(users, sessions, throttle)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    return credentials.credentials if credentials is not None else None


def get_current_session(
    token: Annotated[str | None, Depends(get_bearer_token)],
    sessions: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> UserSession:
    """Dependency: require a live bearer token. Raises 401 if missing, unknown or expired."""
    return validate_token(sessions, token)


def require_roles(*roles: str) -> Callable[..., UserSession]:
    """
    Build a dependency that authenticates the caller and requires one of roles.
    With no roles, any authenticated session passes.
    """
    required = frozenset(roles)

    def guard(session: Annotated[UserSession, Depends(get_current_session)]) -> UserSession:
        return check_role(session, required)

    return guard


require_admin = require_roles("admin")
require_editor = require_roles("admin", "editor")
