"""Editable working copy of an event.

An ``EventDraft`` is what the editing surface mutates between "begin
editing" and "save". It is immutable: every roster, schedule or window
operation returns a new draft built with ``model_copy``.

Roster membership is held as one ordered map per family
(``person_id -> category``) rather than as parallel lists, so a person
can never sit in two categories of the same family. The list views the
persisted record uses (``potential_staff``, ``committed_staff``, ...)
are derived from those maps in insertion order.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar, NamedTuple, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NEW_ID_PREFIX = "new-"


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime. Naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class EventKind(str, Enum):
    STANDARD = "standard"
    NWTA = "nwta"


class StaffCategory(str, Enum):
    """Staff roster categories. Values match the persisted column names."""

    POTENTIAL = "potential_staff"
    COMMITTED = "committed_staff"
    ALTERNATE = "alternate_staff"


class ParticipantCategory(str, Enum):
    """Participant roster categories. Values match the persisted column names."""

    POTENTIAL = "potential_participants"
    COMMITTED = "committed_participants"
    WAITLIST = "waitlist_participants"


class Audience(str, Enum):
    """Who a publication window opens applications for."""

    STAFF = "staff"
    PARTICIPANT = "participant"

    @property
    def window_field(self) -> str:
        return f"{self.value}_published_time"


class Boundary(str, Enum):
    START = "start"
    END = "end"


class ScheduledSession(BaseModel):
    """A single timed block of an event's participant schedule."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.start >= self.end:
            raise ValueError("session start must be before its end")
        return self


class Window(BaseModel):
    """An application-open period. Either boundary may be unset mid-edit."""

    model_config = ConfigDict(frozen=True)

    start: datetime | None = None
    end: datetime | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        # Half-edited windows were historically persisted with "" for the
        # missing boundary.
        if value == "":
            return None
        return value

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    def get(self, boundary: Boundary) -> datetime | None:
        return getattr(self, boundary.value)

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


class EventDraft(BaseModel):
    """In-memory editable copy of a standard event.

    Attributes:
        id: Persisted event id, or an id starting with ``new-`` for an
            event that has not been saved yet.
        staff: Ordered map of person id to staff category.
        participants: Ordered map of person id to participant category.
        primary_leader_id: Person leading the event. Never in ``leaders``.
        leaders: Co-leaders, each currently committed staff.
        participant_schedule: Sessions that define the event's bounds.
        staff_schedule: Staff sessions, carried but not validated.
        start_at, end_at: Overall bounds, kept in step with the
            participant schedule.
        staff_published_time, participant_published_time: Application
            windows; None means not yet published.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[EventKind] = EventKind.STANDARD

    id: str
    name: str = ""
    description: str | None = None
    event_type_id: str | None = None
    area_id: str | None = None
    community_id: str | None = None
    venue_id: str | None = None
    transaction_log_id: str | None = None

    staff_cost: int = Field(default=0, ge=0)
    staff_capacity: int = Field(default=0, ge=0)
    participant_cost: int = Field(default=0, ge=0)
    participant_capacity: int = Field(default=0, ge=0)

    staff: dict[str, StaffCategory] = Field(default_factory=dict)
    participants: dict[str, ParticipantCategory] = Field(default_factory=dict)
    primary_leader_id: str | None = None
    leaders: tuple[str, ...] = ()

    participant_schedule: tuple[ScheduledSession, ...] = ()
    staff_schedule: tuple[ScheduledSession, ...] = ()
    start_at: datetime | None = None
    end_at: datetime | None = None
    staff_published_time: Window | None = None
    participant_published_time: Window | None = None

    is_published: bool = False
    is_active: bool = True

    @field_validator("start_at", "end_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _check_leadership(self) -> Self:
        if len(set(self.leaders)) != len(self.leaders):
            raise ValueError("co-leaders must not repeat")
        if self.primary_leader_id is not None and self.primary_leader_id in self.leaders:
            raise ValueError("primary leader cannot also be a co-leader")
        for person_id in self.leaders:
            if self.staff.get(person_id) is not StaffCategory.COMMITTED:
                raise ValueError(f"co-leader {person_id} is not committed staff")
        return self

    @property
    def is_new(self) -> bool:
        return self.id.startswith(NEW_ID_PREFIX)

    def staff_in(self, category: StaffCategory) -> tuple[str, ...]:
        return tuple(p for p, c in self.staff.items() if c is category)

    def participants_in(self, category: ParticipantCategory) -> tuple[str, ...]:
        return tuple(p for p, c in self.participants.items() if c is category)

    @property
    def potential_staff(self) -> tuple[str, ...]:
        return self.staff_in(StaffCategory.POTENTIAL)

    @property
    def committed_staff(self) -> tuple[str, ...]:
        return self.staff_in(StaffCategory.COMMITTED)

    @property
    def alternate_staff(self) -> tuple[str, ...]:
        return self.staff_in(StaffCategory.ALTERNATE)

    @property
    def potential_participants(self) -> tuple[str, ...]:
        return self.participants_in(ParticipantCategory.POTENTIAL)

    @property
    def committed_participants(self) -> tuple[str, ...]:
        return self.participants_in(ParticipantCategory.COMMITTED)

    @property
    def waitlist_participants(self) -> tuple[str, ...]:
        return self.participants_in(ParticipantCategory.WAITLIST)

    def window(self, audience: Audience) -> Window | None:
        return getattr(self, audience.window_field)

    def as_record(self) -> dict[str, Any]:
        """Return the draft in the persisted record's shape, JSON-ready."""
        data = self.model_dump(mode="json", exclude={"staff", "participants"})
        for category in StaffCategory:
            data[category.value] = list(self.staff_in(category))
        for category in ParticipantCategory:
            data[category.value] = list(self.participants_in(category))
        data["kind"] = self.kind.value
        data["is_new"] = self.is_new
        return data


class NwtaEventDraft(EventDraft):
    """Draft of an NWTA event: a standard draft plus three NWTA rosters."""

    kind: ClassVar[EventKind] = EventKind.NWTA

    rookies: tuple[str, ...] = ()
    elders: tuple[str, ...] = ()
    mos: tuple[str, ...] = ()


class Outcome(NamedTuple):
    """Result of a fallible draft operation.

    ``draft`` is the input draft, unchanged, whenever ``failures`` is
    non-empty.
    """

    draft: EventDraft
    failures: tuple = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def new_event_draft(kind: EventKind = EventKind.STANDARD) -> EventDraft:
    """Build the empty, capacity-zero template for a new event."""
    draft_id = f"{NEW_ID_PREFIX}{uuid4().hex}"
    if kind is EventKind.NWTA:
        return NwtaEventDraft(id=draft_id)
    return EventDraft(id=draft_id)
