"""ORM model for the append-only audit log of privileged destructive actions."""

from sqlalchemy import Column, DateTime, Integer, String, func

from hacktrack.models.base import Base


class AuditEntry(Base):
    """One audit record. Rows are only ever inserted, never updated or deleted."""

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(64), nullable=False, index=True)
    target_username = Column(String(255), nullable=False)
    actor = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
