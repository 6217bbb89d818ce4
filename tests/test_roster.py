"""Tests for the staff and participant roster state machine."""

import pytest
from pydantic import ValidationError

from event_admin.roster.draft import EventDraft, ParticipantCategory, StaffCategory
from event_admin.roster.failures import InvalidTransition
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
    set_staff_category,
)

POTENTIAL = StaffCategory.POTENTIAL
COMMITTED = StaffCategory.COMMITTED
ALTERNATE = StaffCategory.ALTERNATE


def make_draft(**kwargs) -> EventDraft:
    return EventDraft(id="event-1", name="Test Event", **kwargs)


@pytest.fixture(name="draft")
def draft_fixture() -> EventDraft:
    return make_draft(
        staff={"p1": POTENTIAL, "p2": COMMITTED, "p3": COMMITTED, "p4": ALTERNATE},
        participants={
            "a": ParticipantCategory.POTENTIAL,
            "b": ParticipantCategory.COMMITTED,
            "c": ParticipantCategory.WAITLIST,
        },
        primary_leader_id="p3",
        leaders=("p2",),
    )


class TestMoveStaff:
    def test_potential_to_committed(self, draft: EventDraft):
        outcome = move_staff(draft, "p1", POTENTIAL, COMMITTED)

        assert outcome.ok
        assert "p1" in outcome.draft.committed_staff
        assert "p1" not in outcome.draft.potential_staff
        assert outcome.draft.leaders == ("p2",)

    def test_original_draft_unchanged(self, draft: EventDraft):
        move_staff(draft, "p1", POTENTIAL, COMMITTED)
        assert draft.potential_staff == ("p1",)

    @pytest.mark.parametrize("source", list(StaffCategory))
    @pytest.mark.parametrize("target", list(StaffCategory))
    def test_person_ends_in_exactly_one_category(self, source, target):
        draft = make_draft(staff={"x": source})
        moved = move_staff(draft, "x", source, target).draft

        memberships = [c for c in StaffCategory if "x" in moved.staff_in(c)]
        assert memberships == [target]

    def test_moved_person_appended_to_target(self, draft: EventDraft):
        moved = move_staff(draft, "p1", POTENTIAL, COMMITTED).draft
        assert moved.committed_staff == ("p2", "p3", "p1")

    def test_leaving_committed_clears_leadership(self, draft: EventDraft):
        moved = move_staff(draft, "p2", COMMITTED, ALTERNATE).draft

        assert "p2" in moved.alternate_staff
        assert moved.leaders == ()

    def test_move_from_wrong_category_fails(self, draft: EventDraft):
        outcome = move_staff(draft, "p1", COMMITTED, ALTERNATE)

        assert not outcome.ok
        assert outcome.draft is draft
        assert outcome.failures == (InvalidTransition("committed_staff", "p1"),)

    def test_move_unknown_person_fails(self, draft: EventDraft):
        outcome = move_staff(draft, "nobody", POTENTIAL, COMMITTED)
        assert isinstance(outcome.failures[0], InvalidTransition)

    def test_move_within_same_category_is_noop(self, draft: EventDraft):
        outcome = move_staff(draft, "p2", COMMITTED, COMMITTED)

        assert outcome.ok
        assert outcome.draft.committed_staff == ("p2", "p3")
        assert outcome.draft.leaders == ("p2",)

    def test_accepts_category_names(self, draft: EventDraft):
        outcome = move_staff(draft, "p4", "alternate_staff", "committed_staff")
        assert "p4" in outcome.draft.committed_staff

    def test_unknown_category_name_raises(self, draft: EventDraft):
        with pytest.raises(ValueError):
            move_staff(draft, "p1", "potential_staff", "rookies")


class TestRemoveStaff:
    def test_remove_from_committed_clears_leadership(self, draft: EventDraft):
        removed = remove_staff(draft, "p2", COMMITTED)

        assert "p2" not in removed.staff
        assert removed.leaders == ()

    def test_remove_absent_is_noop(self, draft: EventDraft):
        assert remove_staff(draft, "p1", ALTERNATE) is draft
        assert remove_staff(draft, "nobody", POTENTIAL) is draft


class TestAddStaffCandidate:
    def test_adds_as_potential(self, draft: EventDraft):
        added = add_staff_candidate(draft, "new")
        assert added.potential_staff == ("p1", "new")

    def test_existing_staff_untouched(self, draft: EventDraft):
        assert add_staff_candidate(draft, "p2") is draft


class TestLeadership:
    def test_promote_committed_staff(self, draft: EventDraft):
        draft = move_staff(draft, "p1", POTENTIAL, COMMITTED).draft
        promoted = promote_to_leader(draft, "p1")
        assert promoted.leaders == ("p2", "p1")

    @pytest.mark.parametrize("person_id", ["p1", "p4", "nobody"])
    def test_promote_requires_committed(self, draft: EventDraft, person_id):
        assert promote_to_leader(draft, person_id) is draft

    def test_promote_primary_leader_is_noop(self, draft: EventDraft):
        assert promote_to_leader(draft, "p3") is draft

    def test_promote_twice_does_not_duplicate(self, draft: EventDraft):
        assert promote_to_leader(draft, "p2").leaders == ("p2",)

    def test_remove_leader_keeps_staff_category(self, draft: EventDraft):
        demoted = remove_leader(draft, "p2")

        assert demoted.leaders == ()
        assert "p2" in demoted.committed_staff

    def test_set_primary_leader_removes_from_leaders(self, draft: EventDraft):
        updated = set_primary_leader(draft, "p2")

        assert updated.primary_leader_id == "p2"
        assert "p2" not in updated.leaders

    def test_clear_primary_leader(self, draft: EventDraft):
        updated = set_primary_leader(draft, None)

        assert updated.primary_leader_id is None
        assert updated.leaders == ("p2",)

    def test_set_staff_category_none_leaves_roster(self, draft: EventDraft):
        updated = set_staff_category(draft, "p2", None)

        assert "p2" not in updated.staff
        assert updated.leaders == ()

    @pytest.mark.parametrize("staff", [{}, {"a": POTENTIAL}, {"a": ALTERNATE}])
    def test_draft_rejects_uncommitted_leader(self, staff):
        with pytest.raises(ValidationError, match="not committed staff"):
            make_draft(staff=staff, leaders=("a",))

    def test_draft_rejects_primary_as_co_leader(self):
        with pytest.raises(ValidationError, match="primary leader"):
            make_draft(staff={"a": COMMITTED}, leaders=("a",), primary_leader_id="a")

    def test_draft_rejects_repeated_leader(self):
        with pytest.raises(ValidationError, match="must not repeat"):
            make_draft(staff={"a": COMMITTED}, leaders=("a", "a"))

    def test_validate_applies_leadership_rules(self, draft: EventDraft):
        data = {**draft.model_dump(), "leaders": ("p2", "p1")}
        with pytest.raises(ValidationError):
            EventDraft.model_validate(data)


class TestParticipants:
    @pytest.mark.parametrize("source", list(ParticipantCategory))
    @pytest.mark.parametrize("target", list(ParticipantCategory))
    def test_person_ends_in_exactly_one_category(self, source, target):
        draft = make_draft(participants={"x": source})
        moved = move_participant(draft, "x", source, target).draft

        memberships = [c for c in ParticipantCategory if "x" in moved.participants_in(c)]
        assert memberships == [target]

    def test_waitlist_to_committed(self, draft: EventDraft):
        outcome = move_participant(
            draft, "c", ParticipantCategory.WAITLIST, ParticipantCategory.COMMITTED
        )
        assert outcome.draft.committed_participants == ("b", "c")
        assert outcome.draft.waitlist_participants == ()

    def test_move_from_wrong_category_fails(self, draft: EventDraft):
        outcome = move_participant(
            draft, "a", ParticipantCategory.WAITLIST, ParticipantCategory.COMMITTED
        )
        assert outcome.failures == (InvalidTransition("waitlist_participants", "a"),)
        assert outcome.draft is draft

    def test_move_past_capacity_is_allowed(self):
        draft = make_draft(
            participant_capacity=1,
            participants={"a": ParticipantCategory.COMMITTED, "b": ParticipantCategory.POTENTIAL},
        )
        outcome = move_participant(
            draft, "b", ParticipantCategory.POTENTIAL, ParticipantCategory.COMMITTED
        )

        assert outcome.ok
        assert roster_counts(outcome.draft).participant_over_capacity

    def test_remove_and_add(self, draft: EventDraft):
        removed = remove_participant(draft, "b", ParticipantCategory.COMMITTED)
        assert "b" not in removed.participants
        assert remove_participant(removed, "b", ParticipantCategory.COMMITTED) is removed

        added = add_participant_candidate(removed, "b")
        assert added.potential_participants == ("a", "b")
        assert add_participant_candidate(added, "c") is added

    def test_participant_moves_do_not_touch_leaders(self, draft: EventDraft):
        draft = add_participant_candidate(draft, "p2")
        moved = move_participant(
            draft, "p2", ParticipantCategory.POTENTIAL, ParticipantCategory.WAITLIST
        ).draft
        assert moved.leaders == ("p2",)


class TestRosterCounts:
    def test_zero_staff_capacity_is_uncapped(self):
        draft = make_draft(staff={"a": COMMITTED, "b": COMMITTED}, staff_capacity=0)
        counts = roster_counts(draft)

        assert counts.committed_staff == 2
        assert counts.staff_over_capacity is False

    def test_staff_over_capacity(self):
        draft = make_draft(staff={"a": COMMITTED, "b": COMMITTED}, staff_capacity=1)
        assert roster_counts(draft).staff_over_capacity is True

    def test_zero_participant_capacity_is_a_bound(self):
        draft = make_draft(participants={"a": ParticipantCategory.COMMITTED})
        counts = roster_counts(draft)

        assert counts.participant_capacity == 0
        assert counts.participant_over_capacity is True

    def test_only_committed_counted(self, draft: EventDraft):
        counts = roster_counts(draft)
        assert counts.committed_staff == 2
        assert counts.committed_participants == 1
