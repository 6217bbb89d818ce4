"""Keep an event's start/end bounds in step with its participant schedule."""
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import NamedTuple

from event_admin.roster.draft import EventDraft, ScheduledSession
from event_admin.roster.failures import (
    BoundsMismatch,
    Failure,
    MissingEventBounds,
    ScheduleBoundsUnavailable,
)

logger = logging.getLogger(__name__)


class Bounds(NamedTuple):
    start: datetime | None
    end: datetime | None


def derive_bounds(sessions: Iterable[ScheduledSession]) -> Bounds:
    """
    Return the earliest session start and latest session end.

    Both are None for an empty schedule. The result does not depend on
    session order.
    """
    sessions = list(sessions)
    if not sessions:
        return Bounds(None, None)
    return Bounds(
        start=min(s.start for s in sessions),
        end=max(s.end for s in sessions),
    )


def sync_basic_fields(draft: EventDraft) -> EventDraft:
    """
    Set start_at/end_at from the participant schedule.

    An empty schedule leaves previously set bounds in place.
    """
    start, end = derive_bounds(draft.participant_schedule)
    return draft.model_copy(
        update={
            "start_at": start if start is not None else draft.start_at,
            "end_at": end if end is not None else draft.end_at,
        }
    )


def validate_sync(draft: EventDraft) -> list[Failure]:
    """
    Check that start_at/end_at equal the bounds derived from the schedule.

    Always valid for an empty schedule. Timestamps must match exactly.
    """
    if not draft.participant_schedule:
        return []

    start, end = derive_bounds(draft.participant_schedule)
    if start is None or end is None:
        return [ScheduleBoundsUnavailable("participant_schedule")]

    missing = [
        MissingEventBounds(name)
        for name, value in (("start_at", draft.start_at), ("end_at", draft.end_at))
        if value is None
    ]
    if missing:
        return missing

    failures: list[Failure] = []
    if draft.start_at != start:
        failures.append(BoundsMismatch("start_at", actual=draft.start_at, expected=start))
    if draft.end_at != end:
        failures.append(BoundsMismatch("end_at", actual=draft.end_at, expected=end))
    return failures


def replace_schedule(
    draft: EventDraft, sessions: Iterable[ScheduledSession]
) -> EventDraft:
    """Replace the participant schedule and resync the event bounds."""
    schedule = tuple(sessions)
    logger.debug(f"Draft {draft.id} schedule now has {len(schedule)} sessions")
    return sync_basic_fields(draft.model_copy(update={"participant_schedule": schedule}))


def add_session(draft: EventDraft, session: ScheduledSession) -> EventDraft:
    return replace_schedule(draft, (*draft.participant_schedule, session))


def remove_session(draft: EventDraft, index: int) -> EventDraft:
    """Drop the session at ``index``. Out-of-range indexes leave the draft unchanged."""
    if not 0 <= index < len(draft.participant_schedule):
        return draft
    schedule = draft.participant_schedule
    return replace_schedule(draft, schedule[:index] + schedule[index + 1 :])
