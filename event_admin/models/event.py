"""Event model for scheduled gatherings managed through the console.

This module defines the persisted Event record. Roster categories,
leadership, the participant and staff schedules, and the publication
windows are stored in JSON columns exactly as the editing surface sees
them: ordered arrays of person ids and ``{"start", "end"}`` ISO
timestamp pairs. The invariants between those columns are enforced by
the draft layer in ``event_admin.roster`` before anything is written.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from event_admin.models.nwta_event import NwtaEvent


class Event(SQLModel, table=True):
    """A scheduled gathering with staff and participant rosters.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name, required on save.
        description: Free text description.
        event_type_id, area_id, community_id, venue_id: Opaque references
            into the taxonomy tables owned by other parts of the console.
        transaction_log_id: Key of the transaction log for this event.
        staff_cost, participant_cost: Fees in cents.
        staff_capacity: Staff slots; 0 means uncapped.
        participant_capacity: Participant slots.
        potential_staff, committed_staff, alternate_staff: Ordered person
            ids per staff category.
        potential_participants, committed_participants,
            waitlist_participants: Ordered person ids per participant
            category.
        primary_leader_id: Person leading the event.
        leaders: Co-leader person ids, all drawn from committed staff.
        participant_schedule: Sessions as ``{"start", "end"}`` pairs.
        staff_schedule: Staff sessions, informational only.
        staff_published_time, participant_published_time: Application
            windows, or None when not yet published.
        start_at, end_at: Overall bounds derived from the participant
            schedule.
        is_published: Whether the event is visible to applicants.
        is_active: False once the event has been archived.
        nwta: NWTA extension row, present for NWTA events only.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    description: str | None = None
    event_type_id: str | None = Field(default=None, index=True)
    area_id: str | None = Field(default=None, index=True)
    community_id: str | None = Field(default=None, index=True)
    venue_id: str | None = Field(default=None, index=True)
    transaction_log_id: UUID = Field(default_factory=uuid4, index=True)

    staff_cost: int = Field(default=0)
    staff_capacity: int = Field(default=0)
    potential_staff: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    committed_staff: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    alternate_staff: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    participant_cost: int = Field(default=0)
    participant_capacity: int = Field(default=0)
    potential_participants: list[str] = Field(
        default_factory=list, sa_column=Column(JSON)
    )
    committed_participants: list[str] = Field(
        default_factory=list, sa_column=Column(JSON)
    )
    waitlist_participants: list[str] = Field(
        default_factory=list, sa_column=Column(JSON)
    )

    primary_leader_id: str | None = Field(default=None, index=True)
    leaders: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    participant_schedule: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON)
    )
    staff_schedule: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON)
    )
    staff_published_time: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON)
    )
    participant_published_time: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON)
    )
    start_at: datetime | None = Field(default=None, index=True)
    end_at: datetime | None = Field(default=None, index=True)

    is_published: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    nwta: Optional["NwtaEvent"] = Relationship(
        back_populates="event",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )
