"""NWTA event routes."""
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from event_admin.core.database import get_session
from event_admin.roster.draft import EventKind
from event_admin.roster.store import EventNotFoundError, get_event, list_events
from event_admin.routes.events import event_payload

router = APIRouter(prefix="/nwta-events", tags=["nwta-events"])


@router.get("")
async def all_nwta_events(
    include_archived: bool = False, session: Session = Depends(get_session)
):
    """List events that carry NWTA rosters."""
    events = list_events(session, kind=EventKind.NWTA, include_archived=include_archived)
    return {"events": [event_payload(e) for e in events]}


@router.get("/{event_id}")
async def nwta_event_detail(event_id: str, session: Session = Depends(get_session)):
    """Return a single NWTA event. Standard events are not found here."""
    try:
        event = get_event(session, event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="NWTA event not found")
    if event.nwta is None:
        raise HTTPException(status_code=404, detail="NWTA event not found")
    return event_payload(event)
