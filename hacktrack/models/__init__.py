"""SQLAlchemy ORM models."""

from hacktrack.models.audit import AuditEntry
from hacktrack.models.base import Base
from hacktrack.models.hackathon import Hackathon
from hacktrack.models.user import ROLES, User

__all__ = ["AuditEntry", "Base", "Hackathon", "ROLES", "User"]
