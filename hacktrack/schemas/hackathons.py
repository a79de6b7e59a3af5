"""Request/response schemas for hackathon records."""

from datetime import datetime

from pydantic import ConfigDict

from hacktrack.schemas.base import CamelModel


class HackathonFields(CamelModel):
    """Editable hackathon fields. All optional; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    organizer: str | None = None
    location: str | None = None
    mode: str | None = None
    ppt_needed: str | None = None
    registered: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    team_size: int | None = None
    team_code: str | None = None
    link: str | None = None


class HackathonRecord(HackathonFields):
    """Stored hackathon with id and audit stamps."""

    id: int
    created_by: str | None = None
    created_at: datetime | None = None
    modified_by: str | None = None
    modified_at: datetime | None = None
