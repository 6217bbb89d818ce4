"""In-process registry of open edit sessions.

Each event being edited has exactly one current draft. The registry
refuses further edits while a save of that draft is in flight, and
forgets drafts that have been idle for too long.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from event_admin.roster.draft import EventDraft

logger = logging.getLogger(__name__)


class DraftNotFoundError(LookupError):
    """No edit session is open for the requested draft id."""

    def __init__(self, draft_id: str) -> None:
        super().__init__(f"No open draft: {draft_id}")
        self.draft_id = draft_id


class EditSessionBusy(RuntimeError):
    """The draft is being saved and cannot be edited."""

    def __init__(self, draft_id: str) -> None:
        super().__init__(f"Draft {draft_id} is being saved")
        self.draft_id = draft_id


@dataclass
class EditSession:
    draft: EventDraft
    touched_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    saving: bool = False


class EditSessions:
    """Track the current draft per event being edited."""

    _sessions: dict[str, EditSession] = {}

    @classmethod
    def _get(cls, draft_id: str) -> EditSession:
        try:
            return cls._sessions[draft_id]
        except KeyError:
            raise DraftNotFoundError(draft_id) from None

    @classmethod
    def begin(cls, draft: EventDraft) -> EventDraft:
        """Open an edit session, or resume the one already open for this event."""
        existing = cls._sessions.get(draft.id)
        if existing is not None:
            logger.debug(f"Resuming edit session for {draft.id}")
            existing.touched_at = datetime.now(UTC)
            return existing.draft
        cls._sessions[draft.id] = EditSession(draft)
        logger.info(f"Opened edit session for {draft.id}")
        return draft

    @classmethod
    def get(cls, draft_id: str) -> EventDraft:
        return cls._get(draft_id).draft

    @classmethod
    def update(cls, draft_id: str, draft: EventDraft) -> EventDraft:
        """Replace the current draft. Raises EditSessionBusy during a save."""
        edit = cls._get(draft_id)
        if edit.saving:
            raise EditSessionBusy(draft_id)
        edit.draft = draft
        edit.touched_at = datetime.now(UTC)
        return draft

    @classmethod
    def cancel(cls, draft_id: str) -> None:
        """Discard a draft. Nothing was persisted, so nothing is undone."""
        edit = cls._get(draft_id)
        if edit.saving:
            raise EditSessionBusy(draft_id)
        del cls._sessions[draft_id]
        logger.info(f"Cancelled edit session for {draft_id}")

    @classmethod
    def discard(cls, draft_id: str) -> bool:
        """Drop the draft if one is open. Returns whether one was."""
        if draft_id not in cls._sessions:
            return False
        cls.cancel(draft_id)
        return True

    @classmethod
    @contextmanager
    def saving(cls, draft_id: str) -> Iterator[EventDraft]:
        """Hold the draft for the duration of a save.

        Edits are refused until the block exits, whether or not the save
        succeeded.
        """
        edit = cls._get(draft_id)
        if edit.saving:
            raise EditSessionBusy(draft_id)
        edit.saving = True
        try:
            yield edit.draft
        finally:
            edit.saving = False
            edit.touched_at = datetime.now(UTC)

    @classmethod
    def replace_with_saved(cls, draft_id: str, saved: EventDraft) -> EventDraft:
        """Swap the edited draft for the persisted version.

        A new event's draft id changes to the persisted id.
        """
        cls._sessions.pop(draft_id, None)
        cls._sessions[saved.id] = EditSession(saved)
        return saved

    @classmethod
    def purge_stale(cls, max_idle: timedelta, now: datetime | None = None) -> int:
        """Drop idle drafts that are not being saved. Returns how many were dropped."""
        now = now or datetime.now(UTC)
        stale = [
            draft_id
            for draft_id, edit in cls._sessions.items()
            if not edit.saving and now - edit.touched_at > max_idle
        ]
        for draft_id in stale:
            del cls._sessions[draft_id]
        if stale:
            logger.info(f"Purged {len(stale)} stale edit sessions")
        return len(stale)

    @classmethod
    def clear(cls) -> None:
        cls._sessions.clear()
