"""Core app configuration, database and errors."""

from hacktrack.core.config import get_settings, settings
from hacktrack.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
