"""API routes."""

from fastapi import APIRouter

from hacktrack.api import auth, hackathons, health, users

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(hackathons.router, prefix="/hackathons", tags=["hackathons"])
router.include_router(health.router, prefix="/health", tags=["health"])
