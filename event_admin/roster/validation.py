"""Save-time checks run on a draft before it is persisted."""

from event_admin.roster.draft import EventDraft, Outcome
from event_admin.roster.failures import Failure, MissingEventName
from event_admin.roster.publication import validate_publication_windows
from event_admin.roster.schedule import sync_basic_fields, validate_sync


def validate_draft(draft: EventDraft) -> list[Failure]:
    """Return every failure that blocks saving ``draft``."""
    failures: list[Failure] = []
    if not draft.name.strip():
        failures.append(MissingEventName("name"))
    failures.extend(validate_sync(draft))
    failures.extend(validate_publication_windows(draft))
    return failures


def prepare_for_save(draft: EventDraft) -> Outcome:
    """Resync the event bounds, then validate.

    On failure the returned draft is the input draft, not the resynced one.
    """
    synced = sync_basic_fields(draft)
    failures = validate_draft(synced)
    if failures:
        return Outcome(draft, tuple(failures))
    return Outcome(synced)
