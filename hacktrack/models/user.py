"""ORM model for user accounts (credentials and roles)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from hacktrack.models.base import Base

ROLES = ("admin", "editor", "member")


class User(Base):
    """
    User account for bearer-token authentication and role-based access control.

    role: 'admin', 'editor' or 'member'. request_admin is an advisory flag set at
    self-registration; it grants nothing until an admin changes the role.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="member")
    request_admin = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    modified_by = Column(String(255), nullable=True)
    modified_at = Column(DateTime(timezone=True), nullable=True)
