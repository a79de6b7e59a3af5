"""Hackathon record store: plain CRUD with created/modified stamps."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hacktrack.core.errors import NotFoundError, StoreFailureError
from hacktrack.models import Hackathon
from hacktrack.schemas.hackathons import HackathonFields, HackathonRecord

logger = logging.getLogger(__name__)


class HackathonStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Hackathon store %s failed", action, exc_info=True)
            raise StoreFailureError(cause=e) from e

    def _get(self, hackathon_id: int) -> Hackathon:
        row = self.db.get(Hackathon, hackathon_id)
        if row is None:
            raise NotFoundError(f"Hackathon {hackathon_id} not found.")
        return row

    def list_all(self) -> list[HackathonRecord]:
        """All records, newest first."""
        with self._store_errors("list"):
            rows = self.db.query(Hackathon).order_by(Hackathon.id.desc()).all()
        return [HackathonRecord.model_validate(r) for r in rows]

    def get(self, hackathon_id: int) -> HackathonRecord:
        with self._store_errors("get"):
            row = self._get(hackathon_id)
        return HackathonRecord.model_validate(row)

    def create(self, fields: HackathonFields, actor: str) -> HackathonRecord:
        now = datetime.now(UTC)
        row = Hackathon(
            **fields.model_dump(),
            created_by=actor,
            created_at=now,
            modified_by=actor,
            modified_at=now,
        )
        with self._store_errors("create"):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        logger.info("Hackathon created", extra={"hackathon_id": row.id, "actor": actor})
        return HackathonRecord.model_validate(row)

    def update(self, hackathon_id: int, fields: HackathonFields, actor: str) -> HackathonRecord:
        """Apply only the fields present in the request body."""
        with self._store_errors("update"):
            row = self._get(hackathon_id)
            for name, value in fields.model_dump(exclude_unset=True).items():
                setattr(row, name, value)
            row.modified_by = actor
            row.modified_at = datetime.now(UTC)
            self.db.commit()
            self.db.refresh(row)
        logger.info("Hackathon updated", extra={"hackathon_id": hackathon_id, "actor": actor})
        return HackathonRecord.model_validate(row)

    def delete(self, hackathon_id: int, actor: str) -> None:
        with self._store_errors("delete"):
            row = self._get(hackathon_id)
            self.db.delete(row)
            self.db.commit()
        logger.info("Hackathon deleted", extra={"hackathon_id": hackathon_id, "actor": actor})
