"""Roster state machine for event staff and participants.

Staff move freely between potential, committed and alternate; participants
between potential, committed and waitlist. Leadership is attached to
committed staff only: every staff edit goes through
``set_staff_category``, which drops co-leadership whenever a person ends
up anywhere other than committed.

Capacity is reported by ``roster_counts`` and never blocks a transition.
"""
import logging

from pydantic import BaseModel, ConfigDict

from event_admin.roster.draft import (
    EventDraft,
    Outcome,
    ParticipantCategory,
    StaffCategory,
)
from event_admin.roster.failures import InvalidTransition

logger = logging.getLogger(__name__)


def set_staff_category(
    draft: EventDraft, person_id: str, category: StaffCategory | None
) -> EventDraft:
    """Place ``person_id`` in ``category``, or take them off the staff roster.

    A person already in ``category`` keeps their position in it.
    """
    if category is not None:
        category = StaffCategory(category)
        if draft.staff.get(person_id) is category:
            return draft

    staff = dict(draft.staff)
    staff.pop(person_id, None)
    if category is not None:
        staff[person_id] = category

    leaders = draft.leaders
    if category is not StaffCategory.COMMITTED and person_id in leaders:
        leaders = tuple(p for p in leaders if p != person_id)
        logger.debug(f"Cleared leadership for {person_id} leaving committed staff")

    return draft.model_copy(update={"staff": staff, "leaders": leaders})


def move_staff(
    draft: EventDraft,
    person_id: str,
    from_category: StaffCategory,
    to_category: StaffCategory,
) -> Outcome:
    """Move a staff member between categories.

    Fails with ``InvalidTransition`` if the person is not currently in
    ``from_category``.
    """
    from_category = StaffCategory(from_category)
    to_category = StaffCategory(to_category)
    if draft.staff.get(person_id) is not from_category:
        return Outcome(draft, (InvalidTransition(from_category.value, person_id),))

    logger.debug(
        f"Moving staff {person_id} from {from_category.value} to {to_category.value}"
    )
    return Outcome(set_staff_category(draft, person_id, to_category))


def remove_staff(
    draft: EventDraft, person_id: str, from_category: StaffCategory
) -> EventDraft:
    """Take a person off the staff roster. A no-op if they are not in ``from_category``."""
    if draft.staff.get(person_id) is not StaffCategory(from_category):
        return draft
    return set_staff_category(draft, person_id, None)


def add_staff_candidate(draft: EventDraft, person_id: str) -> EventDraft:
    """Add a person as potential staff unless they are already on the staff roster."""
    if person_id in draft.staff:
        return draft
    return set_staff_category(draft, person_id, StaffCategory.POTENTIAL)


def promote_to_leader(draft: EventDraft, person_id: str) -> EventDraft:
    """Make a committed staff member a co-leader.

    A no-op unless the person is committed staff, is not the primary
    leader, and is not already a co-leader.
    """
    if (
        draft.staff.get(person_id) is not StaffCategory.COMMITTED
        or person_id == draft.primary_leader_id
        or person_id in draft.leaders
    ):
        return draft
    return draft.model_copy(update={"leaders": (*draft.leaders, person_id)})


def remove_leader(draft: EventDraft, person_id: str) -> EventDraft:
    """Drop a co-leader, leaving their staff category alone."""
    if person_id not in draft.leaders:
        return draft
    return draft.model_copy(
        update={"leaders": tuple(p for p in draft.leaders if p != person_id)}
    )


def set_primary_leader(draft: EventDraft, person_id: str | None) -> EventDraft:
    """Set or clear the primary leader, keeping them out of the co-leaders."""
    leaders = tuple(p for p in draft.leaders if p != person_id)
    return draft.model_copy(
        update={"primary_leader_id": person_id, "leaders": leaders}
    )


def set_participant_category(
    draft: EventDraft, person_id: str, category: ParticipantCategory | None
) -> EventDraft:
    """Place ``person_id`` in ``category``, or take them off the participant roster."""
    if category is not None:
        category = ParticipantCategory(category)
        if draft.participants.get(person_id) is category:
            return draft

    participants = dict(draft.participants)
    participants.pop(person_id, None)
    if category is not None:
        participants[person_id] = category
    return draft.model_copy(update={"participants": participants})


def move_participant(
    draft: EventDraft,
    person_id: str,
    from_category: ParticipantCategory,
    to_category: ParticipantCategory,
) -> Outcome:
    """Move a participant between categories.

    Fails with ``InvalidTransition`` if the person is not currently in
    ``from_category``.
    """
    from_category = ParticipantCategory(from_category)
    to_category = ParticipantCategory(to_category)
    if draft.participants.get(person_id) is not from_category:
        return Outcome(draft, (InvalidTransition(from_category.value, person_id),))

    logger.debug(
        f"Moving participant {person_id} from {from_category.value} "
        f"to {to_category.value}"
    )
    return Outcome(set_participant_category(draft, person_id, to_category))


def remove_participant(
    draft: EventDraft, person_id: str, from_category: ParticipantCategory
) -> EventDraft:
    if draft.participants.get(person_id) is not ParticipantCategory(from_category):
        return draft
    return set_participant_category(draft, person_id, None)


def add_participant_candidate(draft: EventDraft, person_id: str) -> EventDraft:
    if person_id in draft.participants:
        return draft
    return set_participant_category(draft, person_id, ParticipantCategory.POTENTIAL)


class RosterCounts(BaseModel):
    """Committed head counts against capacity, for display."""

    model_config = ConfigDict(frozen=True)

    committed_staff: int
    staff_capacity: int
    staff_over_capacity: bool
    committed_participants: int
    participant_capacity: int
    participant_over_capacity: bool


def roster_counts(draft: EventDraft) -> RosterCounts:
    """Count committed staff and participants against capacity.

    A staff capacity of 0 means uncapped. Participant capacity is always
    a real bound.
    """
    staff = len(draft.committed_staff)
    participants = len(draft.committed_participants)
    return RosterCounts(
        committed_staff=staff,
        staff_capacity=draft.staff_capacity,
        staff_over_capacity=draft.staff_capacity > 0 and staff > draft.staff_capacity,
        committed_participants=participants,
        participant_capacity=draft.participant_capacity,
        participant_over_capacity=participants > draft.participant_capacity,
    )
