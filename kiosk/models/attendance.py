"""Attendance model: the check-in state of one person at one event.

There is exactly one row per (event, person). Check-in and checkout
overwrite the status and matching timestamp in place instead of appending
history, so the row always reflects the latest transition.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from kiosk.models.base import new_id

if TYPE_CHECKING:
    from kiosk.models.event import Event


class AttendanceStatus(str, Enum):
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class Attendance(SQLModel, table=True):
    """Current check-in state of a person at an event.

    Both statuses can be re-entered any number of times; there is no
    terminal state. A re-check-in sets ``check_in_at`` and leaves the
    previous ``check_out_at`` untouched.

    Attributes:
        id: Unique identifier.
        organization_id: Owning organization.
        event_id: Foreign key to the Event.
        person_id: Foreign key to the Person.
        status: CHECKED_IN or CHECKED_OUT.
        check_in_at: Time of the most recent check-in.
        check_out_at: Time of the most recent checkout.
        notes: Free-form staff notes.
        event: Reference to the parent Event object.
    """
    __table_args__ = (UniqueConstraint("event_id", "person_id"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    organization_id: str = Field(index=True)
    event_id: str = Field(foreign_key="event.id", index=True)
    person_id: str = Field(foreign_key="person.id", index=True)
    status: AttendanceStatus
    check_in_at: datetime | None = None
    check_out_at: datetime | None = None
    notes: str | None = None

    # Relationship
    event: Optional["Event"] = Relationship(back_populates="attendances")
