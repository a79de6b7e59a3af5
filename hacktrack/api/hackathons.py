"""Hackathon record endpoints: public reads, editor/admin writes, admin deletes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from hacktrack.api.deps import get_hackathon_store, require_admin, require_editor
from hacktrack.schemas.auth import MessageResponse
from hacktrack.schemas.hackathons import HackathonFields, HackathonRecord
from hacktrack.services.hackathons import HackathonStore
from hacktrack.services.sessions import UserSession

router = APIRouter()


@router.get("", response_model=list[HackathonRecord])
def list_hackathons(
    store: Annotated[HackathonStore, Depends(get_hackathon_store)],
) -> list[HackathonRecord]:
    """All hackathons, latest first. No authentication required."""
    return store.list_all()


@router.get("/{hackathon_id}", response_model=HackathonRecord)
def get_hackathon(
    hackathon_id: int,
    store: Annotated[HackathonStore, Depends(get_hackathon_store)],
) -> HackathonRecord:
    return store.get(hackathon_id)


@router.post("", response_model=HackathonRecord, status_code=status.HTTP_201_CREATED)
def create_hackathon(
    body: HackathonFields,
    editor: Annotated[UserSession, Depends(require_editor)],
    store: Annotated[HackathonStore, Depends(get_hackathon_store)],
) -> HackathonRecord:
    return store.create(body, actor=editor.username)


@router.put("/{hackathon_id}", response_model=HackathonRecord)
def update_hackathon(
    hackathon_id: int,
    body: HackathonFields,
    editor: Annotated[UserSession, Depends(require_editor)],
    store: Annotated[HackathonStore, Depends(get_hackathon_store)],
) -> HackathonRecord:
    """Update the fields present in the body; absent fields keep their values."""
    return store.update(hackathon_id, body, actor=editor.username)


@router.delete("/{hackathon_id}", response_model=MessageResponse)
def delete_hackathon(
    hackathon_id: int,
    admin: Annotated[UserSession, Depends(require_admin)],
    store: Annotated[HackathonStore, Depends(get_hackathon_store)],
) -> MessageResponse:
    store.delete(hackathon_id, actor=admin.username)
    return MessageResponse(message=f"Hackathon {hackathon_id} deleted")
