"""Pickup code model binding a short code to a youth at an event.

A code moves from issued to redeemed exactly once and is never reused.
Code values are unique within an event, including codes that have already
been redeemed, so a stale printed label can never match a newer child.
A youth holds at most one unredeemed code per event.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import Field, Relationship, SQLModel

from kiosk.models.base import new_id, utcnow

if TYPE_CHECKING:
    from kiosk.models.event import Event


class PickupCode(SQLModel, table=True):
    """A one-time code authorizing checkout of a youth.

    Attributes:
        id: Unique identifier.
        organization_id: Owning organization.
        event_id: Foreign key to the Event the code is valid for.
        youth_person_id: Foreign key to the youth the code releases.
        code: Short uppercase code shown on the pickup label.
        issued_at: When the code was generated.
        redeemed_at: When the code was used; None while still valid.
        redeemed_by_adult_id: Adult who picked the youth up, if recorded.
        event: Reference to the parent Event object.
    """
    __table_args__ = (
        UniqueConstraint("event_id", "code"),
        Index("ix_pickupcode_event_youth", "event_id", "youth_person_id"),
        Index(
            "uq_pickupcode_unredeemed_youth",
            "event_id",
            "youth_person_id",
            unique=True,
            sqlite_where=text("redeemed_at IS NULL"),
        ),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    organization_id: str = Field(index=True)
    event_id: str = Field(foreign_key="event.id")
    youth_person_id: str = Field(foreign_key="person.id")
    code: str
    issued_at: datetime = Field(default_factory=utcnow)
    redeemed_at: datetime | None = None
    redeemed_by_adult_id: str | None = Field(default=None, foreign_key="person.id")

    # Relationship
    event: Optional["Event"] = Relationship(back_populates="pickup_codes")

    @property
    def is_redeemed(self) -> bool:
        return self.redeemed_at is not None
