"""Load drafts from, and save drafts to, the event tables."""
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from event_admin.models import Event, NwtaEvent
from event_admin.roster.draft import (
    EventDraft,
    EventKind,
    NwtaEventDraft,
    ParticipantCategory,
    ScheduledSession,
    StaffCategory,
    Window,
    as_utc,
)
from event_admin.roster.failures import Failure
from event_admin.roster.validation import prepare_for_save

logger = logging.getLogger(__name__)

# Lowest precedence first: a person listed in several categories of a
# persisted record keeps the last one here.
STAFF_PRECEDENCE = (
    StaffCategory.POTENTIAL,
    StaffCategory.ALTERNATE,
    StaffCategory.COMMITTED,
)
PARTICIPANT_PRECEDENCE = (
    ParticipantCategory.POTENTIAL,
    ParticipantCategory.WAITLIST,
    ParticipantCategory.COMMITTED,
)

# Draft fields copied straight onto the record.
PLAIN_FIELDS = (
    "name",
    "description",
    "event_type_id",
    "area_id",
    "community_id",
    "venue_id",
    "staff_cost",
    "staff_capacity",
    "participant_cost",
    "participant_capacity",
    "primary_leader_id",
    "is_published",
    "is_active",
)


class EventNotFoundError(LookupError):
    """No event exists with the requested id."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class DraftValidationError(ValueError):
    """A draft was submitted for save with blocking failures."""

    def __init__(self, failures: Iterable[Failure]) -> None:
        self.failures = tuple(failures)
        super().__init__("; ".join(str(f) for f in self.failures))


def _category_map(
    event: Event, precedence: tuple[Enum, ...]
) -> dict[str, Enum]:
    members: dict[str, Enum] = {}
    for category in precedence:
        for person_id in getattr(event, category.value) or []:
            previous = members.pop(person_id, None)
            if previous is not None and previous is not category:
                logger.warning(
                    f"Event {event.id}: {person_id} listed in both "
                    f"{previous.value} and {category.value}, keeping {category.value}"
                )
            members[person_id] = category
    return members


def _leaders(event: Event, staff: dict[str, Enum]) -> tuple[str, ...]:
    leaders: list[str] = []
    for person_id in event.leaders or []:
        if person_id in leaders:
            continue
        if person_id == event.primary_leader_id:
            logger.warning(
                f"Event {event.id}: primary leader {person_id} dropped from co-leaders"
            )
            continue
        if staff.get(person_id) is not StaffCategory.COMMITTED:
            logger.warning(
                f"Event {event.id}: co-leader {person_id} is not committed staff, dropped"
            )
            continue
        leaders.append(person_id)
    return tuple(leaders)


def _schedule(event: Event, name: str) -> tuple[ScheduledSession, ...]:
    sessions: list[ScheduledSession] = []
    for data in getattr(event, name) or []:
        try:
            sessions.append(ScheduledSession.model_validate(data))
        except ValidationError as e:
            logger.warning(f"Event {event.id}: unreadable {name} entry {data!r} dropped: {e}")
    return tuple(sessions)


def _window(event: Event, name: str) -> Window | None:
    data = getattr(event, name)
    if not data:
        return None
    try:
        window = Window.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Event {event.id}: unreadable {name} {data!r} dropped: {e}")
        return None
    return None if window.is_empty else window


def draft_from_record(event: Event) -> EventDraft:
    """
    Build a draft from a persisted event.

    Legacy rows that break the roster invariants are normalized here.
    Duplicate category membership resolves to the highest category.
    Co-leaders who are not committed staff are dropped, as are unreadable
    sessions and windows.
    """
    staff = _category_map(event, STAFF_PRECEDENCE)
    participants = _category_map(event, PARTICIPANT_PRECEDENCE)

    fields = {name: getattr(event, name) for name in PLAIN_FIELDS}
    fields.update(
        id=str(event.id),
        transaction_log_id=str(event.transaction_log_id),
        staff=staff,
        participants=participants,
        leaders=_leaders(event, staff),
        participant_schedule=_schedule(event, "participant_schedule"),
        staff_schedule=_schedule(event, "staff_schedule"),
        start_at=as_utc(event.start_at) if event.start_at else None,
        end_at=as_utc(event.end_at) if event.end_at else None,
        staff_published_time=_window(event, "staff_published_time"),
        participant_published_time=_window(event, "participant_published_time"),
    )

    if event.nwta is not None:
        return NwtaEventDraft(
            **fields,
            rookies=tuple(event.nwta.rookies or []),
            elders=tuple(event.nwta.elders or []),
            mos=tuple(event.nwta.mos or []),
        )
    return EventDraft(**fields)


def apply_draft(event: Event, draft: EventDraft) -> Event:
    """Copy a draft's state onto a record. Timestamps are stored in UTC."""
    record = draft.as_record()
    for name in PLAIN_FIELDS:
        setattr(event, name, getattr(draft, name))
    for category in (*StaffCategory, *ParticipantCategory):
        setattr(event, category.value, record[category.value])
    event.leaders = record["leaders"]
    event.participant_schedule = record["participant_schedule"]
    event.staff_schedule = record["staff_schedule"]
    event.staff_published_time = record["staff_published_time"]
    event.participant_published_time = record["participant_published_time"]
    event.start_at = draft.start_at
    event.end_at = draft.end_at
    event.updated_at = datetime.now(UTC)

    if isinstance(draft, NwtaEventDraft):
        if event.nwta is None:
            event.nwta = NwtaEvent(id=event.id)
        event.nwta.rookies = list(draft.rookies)
        event.nwta.elders = list(draft.elders)
        event.nwta.mos = list(draft.mos)
        event.nwta.updated_at = event.updated_at
    return event


def get_event(session: Session, event_id: str | UUID) -> Event:
    """Return the event with ``event_id`` or raise EventNotFoundError."""
    try:
        key = event_id if isinstance(event_id, UUID) else UUID(event_id)
    except ValueError:
        raise EventNotFoundError(str(event_id)) from None
    event = session.get(Event, key)
    if event is None:
        raise EventNotFoundError(str(event_id))
    return event


def list_events(
    session: Session,
    kind: EventKind | None = None,
    include_archived: bool = False,
) -> list[Event]:
    """Return events ordered by start time, unscheduled events last."""
    statement = select(Event)
    if kind is EventKind.NWTA:
        statement = statement.join(NwtaEvent)
    if not include_archived:
        statement = statement.where(Event.is_active == True)  # noqa: E712
    statement = statement.order_by(Event.start_at.is_(None), Event.start_at)
    return list(session.exec(statement).all())


def save_draft(session: Session, draft: EventDraft) -> EventDraft:
    """
    Persist a draft, creating the event when the draft is new.

    The draft is resynced and validated first; blocking failures raise
    DraftValidationError and nothing is written. Returns a fresh draft
    built from the saved record.
    """
    outcome = prepare_for_save(draft)
    if not outcome.ok:
        logger.info(f"Draft {draft.id} not saved: {len(outcome.failures)} failures")
        raise DraftValidationError(outcome.failures)
    draft = outcome.draft

    if draft.is_new:
        event = Event(name=draft.name)
    else:
        event = get_event(session, draft.id)

    apply_draft(event, draft)
    session.add(event)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Saving draft {draft.id} failed: {e}")
        raise

    session.refresh(event)
    logger.info(
        f"{'Created' if draft.is_new else 'Updated'} {draft.kind.value} event {event.id}"
    )
    return draft_from_record(event)


def archive_event(session: Session, event_id: str | UUID) -> Event:
    """Soft-delete an event by marking it inactive."""
    event = get_event(session, event_id)
    event.is_active = False
    event.updated_at = datetime.now(UTC)
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"Archived event {event.id}")
    return event
