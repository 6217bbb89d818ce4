"""NWTA extension rows.

An NWTA event is an ordinary Event plus three extra person lists. The
extension shares its primary key with the base event, so deleting the
event removes the extension as well.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from event_admin.models.event import Event


class NwtaEvent(SQLModel, table=True):
    """NWTA-specific rosters attached to an Event.

    Attributes:
        id: Same value as the base Event's id.
        rookies: Person ids of first-time staff.
        elders: Person ids of elders serving the event.
        mos: Person ids of men of service.
        event: Reference to the base Event.
    """
    __tablename__ = "nwta_event"

    id: UUID = Field(foreign_key="event.id", primary_key=True)
    rookies: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    elders: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    mos: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    event: Optional["Event"] = Relationship(back_populates="nwta")
