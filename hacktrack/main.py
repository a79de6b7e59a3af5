"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hacktrack.api import router as api_router
from hacktrack.core.config import settings
from hacktrack.core.errors import (
    StoreFailureError,
    TooManyAttemptsError,
    TrackerError,
    UnauthorizedError,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Hackathon Tracker API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Wildcard origins are only honoured in dev.
cors_origins = settings.cors_origins
if settings.APP_ENV != "dev":
    cors_origins = [o for o in cors_origins if o != "*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


def _error_body(code: str, detail: object) -> dict[str, object]:
    return {"error": code, "detail": detail}


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    """Turn domain errors into a status code plus {"error", "detail"} body."""
    headers: dict[str, str] = {}
    detail = exc.message
    if isinstance(exc, UnauthorizedError):
        headers["WWW-Authenticate"] = "Bearer"
    if isinstance(exc, TooManyAttemptsError) and exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
    if isinstance(exc, StoreFailureError):
        logger.error(
            "Store failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.cause,
        )
        if settings.DEBUG and exc.cause is not None:
            detail = f"{exc.message} ({exc.cause})"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, detail),
        headers=headers or None,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request fields are reported as 400 invalid_input."""
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content=_error_body("invalid_input", errors))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.DEBUG else "Internal server error"
    return JSONResponse(status_code=500, content=_error_body("internal_server_error", detail))


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Hackathon Tracker API"}
