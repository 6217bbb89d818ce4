"""Draft routes: the editing flow for events.

A client opens a draft (new, or copied from a persisted event), applies
roster, schedule and window edits to it, and finally saves or cancels.
Every response carries the current draft, its roster counts and the
failures that would currently block a save.
"""
from datetime import datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlmodel import Session

from event_admin.core.database import get_session
from event_admin.roster.draft import (
    Audience,
    Boundary,
    EventDraft,
    EventKind,
    NwtaEventDraft,
    ParticipantCategory,
    ScheduledSession,
    StaffCategory,
    new_event_draft,
)
from event_admin.roster.failures import Failure
from event_admin.roster.manager import (
    add_participant_candidate,
    add_staff_candidate,
    move_participant,
    move_staff,
    promote_to_leader,
    remove_leader,
    remove_participant,
    remove_staff,
    roster_counts,
    set_primary_leader,
)
from event_admin.roster.publication import set_window_boundary
from event_admin.roster.schedule import add_session, remove_session, replace_schedule
from event_admin.roster.sessions import DraftNotFoundError, EditSessionBusy, EditSessions
from event_admin.roster.store import (
    DraftValidationError,
    EventNotFoundError,
    draft_from_record,
    get_event,
    save_draft,
)
from event_admin.roster.validation import validate_draft

router = APIRouter(prefix="/drafts", tags=["drafts"])

NWTA_FIELDS = {"rookies", "elders", "mos"}


class DraftCreate(BaseModel):
    kind: EventKind = EventKind.STANDARD


class DraftPatch(BaseModel):
    """Plain fields of a draft. Omitted fields are left alone."""

    name: str | None = None
    description: str | None = None
    event_type_id: str | None = None
    area_id: str | None = None
    community_id: str | None = None
    venue_id: str | None = None
    staff_cost: int | None = None
    staff_capacity: int | None = None
    participant_cost: int | None = None
    participant_capacity: int | None = None
    is_published: bool | None = None
    is_active: bool | None = None
    rookies: list[str] | None = None
    elders: list[str] | None = None
    mos: list[str] | None = None


class StaffEdit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person_id: str
    action: Literal["add", "move", "remove", "promote", "demote"]
    from_category: StaffCategory | None = Field(default=None, alias="from")
    to_category: StaffCategory | None = Field(default=None, alias="to")


class ParticipantEdit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person_id: str
    action: Literal["add", "move", "remove"]
    from_category: ParticipantCategory | None = Field(default=None, alias="from")
    to_category: ParticipantCategory | None = Field(default=None, alias="to")


class PrimaryLeaderUpdate(BaseModel):
    person_id: str | None


class ScheduleUpdate(BaseModel):
    sessions: list[ScheduledSession]


class WindowEdit(BaseModel):
    value: datetime | None


def _failures(failures: tuple[Failure, ...] | list[Failure]) -> list[dict[str, Any]]:
    return [f.as_dict() for f in failures]


def draft_response(draft: EventDraft) -> dict[str, Any]:
    return {
        "draft": draft.as_record(),
        "counts": roster_counts(draft).model_dump(),
        "failures": _failures(validate_draft(draft)),
    }


def _current(draft_id: str) -> EventDraft:
    try:
        return EditSessions.get(draft_id)
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail="Draft not found")


def _commit(draft_id: str, draft: EventDraft) -> dict[str, Any]:
    try:
        EditSessions.update(draft_id, draft)
    except EditSessionBusy:
        raise HTTPException(status_code=409, detail="Draft is being saved")
    return draft_response(draft)


def _require(value, name: str):
    if value is None:
        raise HTTPException(status_code=422, detail=f"'{name}' is required for this action")
    return value


@router.post("", status_code=201)
async def create_draft(body: DraftCreate):
    """Open a draft for a new, empty event."""
    return draft_response(EditSessions.begin(new_event_draft(body.kind)))


@router.post("/from-event/{event_id}", status_code=201)
async def edit_event(event_id: str, session: Session = Depends(get_session)):
    """
    Open a draft copied from a persisted event.

    If the event already has an open draft, that draft is returned instead
    so in-progress edits are not lost.
    """
    try:
        event = get_event(session, event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    return draft_response(EditSessions.begin(draft_from_record(event)))


@router.get("/{draft_id}")
async def draft_detail(draft_id: str):
    return draft_response(_current(draft_id))


@router.delete("/{draft_id}", status_code=204)
async def cancel_draft(draft_id: str):
    """Discard a draft without saving."""
    try:
        EditSessions.cancel(draft_id)
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail="Draft not found")
    except EditSessionBusy:
        raise HTTPException(status_code=409, detail="Draft is being saved")


@router.patch("/{draft_id}")
async def update_draft(draft_id: str, body: DraftPatch):
    """
    Update plain fields of a draft.

    NWTA rosters may only be set on NWTA drafts.
    """
    draft = _current(draft_id)
    updates = body.model_dump(exclude_unset=True)
    if NWTA_FIELDS & updates.keys() and not isinstance(draft, NwtaEventDraft):
        raise HTTPException(status_code=400, detail="Not an NWTA event draft")

    try:
        updated = type(draft).model_validate({**draft.model_dump(), **updates})
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=e.errors(include_url=False, include_context=False)
        )
    return _commit(draft_id, updated)


@router.post("/{draft_id}/staff")
async def edit_staff(draft_id: str, body: StaffEdit):
    """
    Apply one staff roster edit.

    Actions:
    - add: new person as potential staff
    - move: between categories given by "from" and "to"
    - remove: off the roster from the "from" category
    - promote / demote: grant or drop co-leadership
    """
    draft = _current(draft_id)
    if body.action == "add":
        draft = add_staff_candidate(draft, body.person_id)
    elif body.action == "move":
        outcome = move_staff(
            draft,
            body.person_id,
            _require(body.from_category, "from"),
            _require(body.to_category, "to"),
        )
        if not outcome.ok:
            raise HTTPException(status_code=400, detail=_failures(outcome.failures))
        draft = outcome.draft
    elif body.action == "remove":
        draft = remove_staff(draft, body.person_id, _require(body.from_category, "from"))
    elif body.action == "promote":
        draft = promote_to_leader(draft, body.person_id)
    else:
        draft = remove_leader(draft, body.person_id)
    return _commit(draft_id, draft)


@router.put("/{draft_id}/primary-leader")
async def update_primary_leader(draft_id: str, body: PrimaryLeaderUpdate):
    draft = set_primary_leader(_current(draft_id), body.person_id)
    return _commit(draft_id, draft)


@router.post("/{draft_id}/participants")
async def edit_participants(draft_id: str, body: ParticipantEdit):
    """Apply one participant roster edit (add, move or remove)."""
    draft = _current(draft_id)
    if body.action == "add":
        draft = add_participant_candidate(draft, body.person_id)
    elif body.action == "move":
        outcome = move_participant(
            draft,
            body.person_id,
            _require(body.from_category, "from"),
            _require(body.to_category, "to"),
        )
        if not outcome.ok:
            raise HTTPException(status_code=400, detail=_failures(outcome.failures))
        draft = outcome.draft
    else:
        draft = remove_participant(
            draft, body.person_id, _require(body.from_category, "from")
        )
    return _commit(draft_id, draft)


@router.put("/{draft_id}/schedule")
async def update_schedule(draft_id: str, body: ScheduleUpdate):
    """Replace the participant schedule; event bounds follow it."""
    draft = replace_schedule(_current(draft_id), body.sessions)
    return _commit(draft_id, draft)


@router.post("/{draft_id}/schedule/sessions")
async def append_session(draft_id: str, body: ScheduledSession):
    draft = add_session(_current(draft_id), body)
    return _commit(draft_id, draft)


@router.delete("/{draft_id}/schedule/sessions/{index}")
async def delete_session(draft_id: str, index: int):
    draft = remove_session(_current(draft_id), index)
    return _commit(draft_id, draft)


@router.put("/{draft_id}/windows/{audience}/{boundary}")
async def update_window(
    draft_id: str, audience: Audience, boundary: Boundary, body: WindowEdit
):
    """
    Set or clear one boundary of a publication window.

    The edit is checked right away against the other boundary and the
    first session start; a rejected edit returns 422 and leaves the
    draft unchanged.
    """
    outcome = set_window_boundary(_current(draft_id), audience, boundary, body.value)
    if not outcome.ok:
        raise HTTPException(status_code=422, detail=_failures(outcome.failures))
    return _commit(draft_id, outcome.draft)


@router.get("/{draft_id}/validation")
async def draft_validation(draft_id: str):
    failures = validate_draft(_current(draft_id))
    return {"valid": not failures, "failures": _failures(failures)}


@router.post("/{draft_id}/save")
async def save(draft_id: str, session: Session = Depends(get_session)):
    """
    Validate and persist a draft.

    On success the edit session continues with the persisted version,
    under the persisted event id. On failure the draft is kept as it was.
    """
    try:
        with EditSessions.saving(draft_id) as draft:
            saved = save_draft(session, draft)
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail="Draft not found")
    except EditSessionBusy:
        raise HTTPException(status_code=409, detail="Draft is being saved")
    except DraftValidationError as e:
        raise HTTPException(status_code=422, detail=_failures(e.failures))
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    return draft_response(EditSessions.replace_with_saved(draft_id, saved))
