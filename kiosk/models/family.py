"""Family (household) model used for kiosk phone lookup.

A family groups the people who share a primary contact phone number.
Families are looked up at the kiosk by the last four digits of that number.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from kiosk.models.base import new_id, utcnow

if TYPE_CHECKING:
    from kiosk.models.person import Person


class Family(SQLModel, table=True):
    """A household within an organization.

    Attributes:
        id: Unique identifier.
        organization_id: Owning organization.
        primary_phone_e164: Normalized phone number, unique per organization.
        phone_last4: Last four digits of the phone, the kiosk search key.
        family_name: Display name for the household.
        created_at: When the family was registered.
        people: Members of the household.
    """
    __table_args__ = (UniqueConstraint("organization_id", "primary_phone_e164"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    organization_id: str = Field(index=True)
    primary_phone_e164: str
    phone_last4: str = Field(index=True)
    family_name: str
    created_at: datetime = Field(default_factory=utcnow)

    # Relationship
    people: list["Person"] = Relationship(back_populates="family")
