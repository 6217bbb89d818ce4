"""Business-rule failures reported by draft operations.

These are values, not exceptions. Roster, schedule and window operations
return them inside an ``Outcome`` (or a plain list for the validators) so
the caller can decide whether a failure blocks a save.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from event_admin.roster.draft import Audience, Boundary


class FailureCode(Enum):
    """Failure codes."""

    INVALID_TRANSITION = "INVALID_TRANSITION"
    INCOMPLETE_WINDOW = "INCOMPLETE_WINDOW"
    INVALID_WINDOW_ORDER = "INVALID_WINDOW_ORDER"
    WINDOW_AFTER_EVENT_START = "WINDOW_AFTER_EVENT_START"
    MISSING_EVENT_BOUNDS = "MISSING_EVENT_BOUNDS"
    BOUNDS_MISMATCH = "BOUNDS_MISMATCH"
    SCHEDULE_BOUNDS_UNAVAILABLE = "SCHEDULE_BOUNDS_UNAVAILABLE"
    MISSING_EVENT_NAME = "MISSING_EVENT_NAME"


@dataclass(frozen=True)
class Failure:
    """Base failure with a code and the draft field it concerns."""

    code: ClassVar[FailureCode]

    field: str

    @property
    def message(self) -> str:
        raise NotImplementedError

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "field": self.field, "message": self.message}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True)
class InvalidTransition(Failure):
    """A roster move named a category the person is not in."""

    code: ClassVar[FailureCode] = FailureCode.INVALID_TRANSITION

    person_id: str

    @property
    def message(self) -> str:
        return f"Person {self.person_id} is not in {self.field}"


@dataclass(frozen=True)
class IncompleteWindow(Failure):
    """Only one boundary of a publication window is set."""

    code: ClassVar[FailureCode] = FailureCode.INCOMPLETE_WINDOW

    missing: Boundary

    @property
    def message(self) -> str:
        return f"{self.field} is missing its {self.missing.value} date"


@dataclass(frozen=True)
class InvalidWindowOrder(Failure):
    """A publication window does not start before it ends."""

    code: ClassVar[FailureCode] = FailureCode.INVALID_WINDOW_ORDER

    start: datetime
    end: datetime

    @property
    def message(self) -> str:
        return f"{self.field} start date must be before end date"


@dataclass(frozen=True)
class WindowAfterEventStart(Failure):
    """A publication window boundary is not before the first session."""

    code: ClassVar[FailureCode] = FailureCode.WINDOW_AFTER_EVENT_START

    audience: Audience
    boundary: Boundary
    value: datetime
    event_start: datetime

    @property
    def label(self) -> str:
        """Boundary name such as ``staff-end``."""
        return f"{self.audience.value}-{self.boundary.value}"

    @property
    def message(self) -> str:
        return (
            f"{self.audience.value.capitalize()} application {self.boundary.value} "
            f"date must be before event start time"
        )

    def as_dict(self) -> dict[str, Any]:
        return {**super().as_dict(), "boundary": self.label}


@dataclass(frozen=True)
class MissingEventBounds(Failure):
    """Sessions exist but the event's start_at or end_at is unset."""

    code: ClassVar[FailureCode] = FailureCode.MISSING_EVENT_BOUNDS

    @property
    def message(self) -> str:
        return f"Event {self.field} is null but participant schedule exists"


@dataclass(frozen=True)
class BoundsMismatch(Failure):
    """Stored event bounds differ from those derived from the schedule."""

    code: ClassVar[FailureCode] = FailureCode.BOUNDS_MISMATCH

    actual: datetime
    expected: datetime

    @property
    def message(self) -> str:
        return (
            f"Event {self.field} {self.actual.isoformat()} does not match "
            f"participant schedule bound {self.expected.isoformat()}"
        )


@dataclass(frozen=True)
class ScheduleBoundsUnavailable(Failure):
    """Bounds could not be derived from a non-empty schedule."""

    code: ClassVar[FailureCode] = FailureCode.SCHEDULE_BOUNDS_UNAVAILABLE

    @property
    def message(self) -> str:
        return "Unable to calculate schedule bounds"


@dataclass(frozen=True)
class MissingEventName(Failure):
    """The draft has no name."""

    code: ClassVar[FailureCode] = FailureCode.MISSING_EVENT_NAME

    @property
    def message(self) -> str:
        return "Event name is required"
