"""Health check endpoint with database connectivity and live session count."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hacktrack.api.deps import get_session_registry
from hacktrack.core.config import settings
from hacktrack.core.database import check_db_connected, get_db
from hacktrack.schemas.health import HealthResponse
from hacktrack.services.sessions import SessionRegistry

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    sessions: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        active_sessions=sessions.active_count(),
    )
