"""Tests for the edit session registry."""

from datetime import UTC, datetime, timedelta

import pytest

from event_admin.roster.draft import EventDraft
from event_admin.roster.sessions import DraftNotFoundError, EditSessionBusy, EditSessions


def test_begin_and_get():
    draft = EventDraft(id="e1")
    assert EditSessions.begin(draft) is draft
    assert EditSessions.get("e1") is draft


def test_begin_resumes_open_session():
    edited = EventDraft(id="e1", name="Edited")
    EditSessions.begin(EventDraft(id="e1"))
    EditSessions.update("e1", edited)

    assert EditSessions.begin(EventDraft(id="e1")) is edited


def test_get_unknown_draft():
    with pytest.raises(DraftNotFoundError):
        EditSessions.get("missing")


def test_cancel_discards():
    EditSessions.begin(EventDraft(id="e1"))
    EditSessions.cancel("e1")

    with pytest.raises(DraftNotFoundError):
        EditSessions.get("e1")


def test_discard():
    EditSessions.begin(EventDraft(id="e1"))

    assert EditSessions.discard("e1") is True
    assert EditSessions.discard("e1") is False
    with pytest.raises(DraftNotFoundError):
        EditSessions.get("e1")


def test_edits_refused_while_saving():
    EditSessions.begin(EventDraft(id="e1"))

    with EditSessions.saving("e1") as draft:
        assert draft.id == "e1"
        with pytest.raises(EditSessionBusy):
            EditSessions.update("e1", EventDraft(id="e1", name="Late edit"))
        with pytest.raises(EditSessionBusy):
            EditSessions.cancel("e1")

    EditSessions.update("e1", EventDraft(id="e1", name="After save"))
    assert EditSessions.get("e1").name == "After save"


def test_failed_save_releases_draft():
    EditSessions.begin(EventDraft(id="e1"))

    with pytest.raises(RuntimeError, match="boom"):
        with EditSessions.saving("e1"):
            raise RuntimeError("boom")

    assert EditSessions.update("e1", EventDraft(id="e1")).id == "e1"


def test_replace_with_saved_rekeys_new_draft():
    EditSessions.begin(EventDraft(id="new-abc"))
    saved = EditSessions.replace_with_saved("new-abc", EventDraft(id="persisted"))

    assert EditSessions.get("persisted") is saved
    with pytest.raises(DraftNotFoundError):
        EditSessions.get("new-abc")


def test_purge_stale():
    EditSessions.begin(EventDraft(id="old"))
    EditSessions.begin(EventDraft(id="busy"))
    later = datetime.now(UTC) + timedelta(hours=3)

    with EditSessions.saving("busy"):
        purged = EditSessions.purge_stale(timedelta(hours=2), now=later)

    assert purged == 1
    with pytest.raises(DraftNotFoundError):
        EditSessions.get("old")
    assert EditSessions.get("busy").id == "busy"
