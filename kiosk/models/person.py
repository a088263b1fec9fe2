"""Person model for adults and youth who can be checked in."""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

from kiosk.models.base import new_id

if TYPE_CHECKING:
    from kiosk.models.family import Family


class PersonRole(str, Enum):
    ADULT = "ADULT"
    YOUTH = "YOUTH"


class Person(SQLModel, table=True):
    """Someone who can be checked into an event.

    Only YOUTH members receive pickup codes. Inactive people are hidden
    from the kiosk roster but keep their attendance history.

    Attributes:
        id: Unique identifier.
        organization_id: Owning organization.
        family_id: Household this person belongs to, if any.
        first_name: Given name.
        last_name: Family name.
        role: ADULT or YOUTH.
        date_of_birth: Optional birth date.
        active: Whether the person participates in check-in.
        family: Reference to the household.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    organization_id: str = Field(index=True)
    family_id: str | None = Field(default=None, foreign_key="family.id", index=True)
    first_name: str
    last_name: str
    role: PersonRole
    date_of_birth: date | None = None
    active: bool = Field(default=True)

    # Relationship
    family: Optional["Family"] = Relationship(back_populates="people")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
