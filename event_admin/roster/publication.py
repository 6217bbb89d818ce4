"""Validation of staff and participant application windows.

A window must open before it closes, and both boundaries must fall
before the event's first session. Edits to one boundary at a time are
checked immediately, and a half-set window is only rejected at save.
"""
import logging
from datetime import datetime

from event_admin.roster.draft import (
    Audience,
    Boundary,
    EventDraft,
    Outcome,
    Window,
)
from event_admin.roster.failures import (
    Failure,
    IncompleteWindow,
    InvalidWindowOrder,
    WindowAfterEventStart,
)

logger = logging.getLogger(__name__)


def first_session_start(draft: EventDraft) -> datetime | None:
    """Start of the first listed participant session, if any."""
    if not draft.participant_schedule:
        return None
    return draft.participant_schedule[0].start


def _check_boundary(
    audience: Audience,
    window: Window,
    boundary: Boundary,
    event_start: datetime | None,
) -> list[Failure]:
    value = window.get(boundary)
    if value is None:
        return []

    failures: list[Failure] = []
    if window.is_complete and window.start >= window.end:
        failures.append(
            InvalidWindowOrder(audience.window_field, start=window.start, end=window.end)
        )
    if event_start is not None and value >= event_start:
        failures.append(
            WindowAfterEventStart(
                audience.window_field,
                audience=audience,
                boundary=boundary,
                value=value,
                event_start=event_start,
            )
        )
    return failures


def validate_window(
    audience: Audience, window: Window | None, event_start: datetime | None
) -> list[Failure]:
    """Save-time check of one publication window. None is always valid."""
    if window is None or window.is_empty:
        return []

    if not window.is_complete:
        missing = Boundary.END if window.end is None else Boundary.START
        present = Boundary.START if missing is Boundary.END else Boundary.END
        return [
            IncompleteWindow(audience.window_field, missing=missing),
            *_check_boundary(audience, window, present, event_start),
        ]

    failures = _check_boundary(audience, window, Boundary.START, event_start)
    for failure in _check_boundary(audience, window, Boundary.END, event_start):
        if failure not in failures:
            failures.append(failure)
    return failures


def validate_publication_windows(draft: EventDraft) -> list[Failure]:
    """Check both windows against the draft's first session."""
    event_start = first_session_start(draft)
    failures: list[Failure] = []
    for audience in Audience:
        failures.extend(validate_window(audience, draft.window(audience), event_start))
    return failures


def set_window_boundary(
    draft: EventDraft,
    audience: Audience,
    boundary: Boundary,
    value: datetime | None,
) -> Outcome:
    """
    Apply a single-boundary edit to a publication window.

    The new value is checked against the other boundary when that one is
    set, and against the first session start. A failing edit leaves the
    draft unchanged. Clearing the last set boundary unpublishes the window.
    """
    audience = Audience(audience)
    boundary = Boundary(boundary)
    current = draft.window(audience) or Window()
    candidate = Window.model_validate({**current.model_dump(), boundary.value: value})

    failures = _check_boundary(audience, candidate, boundary, first_session_start(draft))
    if failures:
        logger.debug(f"Rejected {audience.value} {boundary.value} edit on draft {draft.id}")
        return Outcome(draft, tuple(failures))

    window = None if candidate.is_empty else candidate
    return Outcome(draft.model_copy(update={audience.window_field: window}))
