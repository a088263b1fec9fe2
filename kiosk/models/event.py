"""Event model for activities families check into.

Events are either created by staff or materialized on the fly when a kiosk
checks someone into a calendar-sourced event that has not been stored yet.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from kiosk.models.base import new_id, utcnow

if TYPE_CHECKING:
    from kiosk.models.attendance import Attendance
    from kiosk.models.pickup_code import PickupCode


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Event(SQLModel, table=True):
    """An activity with attendance and pickup codes.

    Attributes:
        id: Unique identifier. For calendar-sourced events this is the
            calendar uid, so repeated check-ins resolve to the same row.
        organization_id: Owning organization.
        title: Event title.
        description: Optional longer description.
        location: Where the event takes place.
        status: Lifecycle status (DRAFT, ACTIVE, COMPLETED, CANCELLED).
        starts_at: When the event starts.
        ends_at: When the event ends, if known.
        created_at: When the row was stored.
        attendances: One attendance row per person checked in.
        pickup_codes: Codes issued to youth at this event.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    organization_id: str = Field(index=True)
    title: str
    description: str | None = None
    location: str | None = None
    status: EventStatus = Field(default=EventStatus.DRAFT)
    starts_at: datetime = Field(default_factory=utcnow)
    ends_at: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)

    # Relationships
    attendances: list["Attendance"] = Relationship(back_populates="event")
    pickup_codes: list["PickupCode"] = Relationship(back_populates="event")
