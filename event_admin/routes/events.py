"""Event routes for listing, viewing and archiving persisted events."""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from event_admin.core.database import get_session
from event_admin.models import Event
from event_admin.roster.sessions import EditSessionBusy, EditSessions
from event_admin.roster.store import (
    EventNotFoundError,
    archive_event,
    draft_from_record,
    get_event,
    list_events,
)

router = APIRouter(prefix="/events", tags=["events"])


def event_payload(event: Event) -> dict[str, Any]:
    """Serialize a record through its normalized draft form."""
    data = draft_from_record(event).as_record()
    data["created_at"] = event.created_at.isoformat()
    data["updated_at"] = event.updated_at.isoformat()
    return data


@router.get("")
async def all_events(
    include_archived: bool = False, session: Session = Depends(get_session)
):
    """
    List events, standard and NWTA alike.

    Events are ordered by start time with unscheduled events last.
    Archived events are left out unless include_archived is set.
    """
    events = list_events(session, include_archived=include_archived)
    return {"events": [event_payload(e) for e in events]}


@router.get("/{event_id}")
async def event_detail(event_id: str, session: Session = Depends(get_session)):
    """Return a single event with its rosters and schedule."""
    try:
        event = get_event(session, event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    return event_payload(event)


@router.delete("/{event_id}")
async def delete_event(event_id: str, session: Session = Depends(get_session)):
    """
    Archive an event.

    Events are never removed; archiving marks them inactive so they drop
    out of the default listing. An open draft of the event is discarded,
    since saving it would bring the event back.
    """
    try:
        event = get_event(session, event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    try:
        EditSessions.discard(str(event.id))
    except EditSessionBusy:
        raise HTTPException(status_code=409, detail="Event draft is being saved")

    return event_payload(archive_event(session, event.id))
