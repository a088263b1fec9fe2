"""Request and response bodies for the JSON API.

The kiosk front end speaks camelCase, so every schema aliases its fields
with ``to_camel`` while still accepting snake_case names in Python.
"""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kiosk.models import AttendanceStatus, EventStatus, PersonRole
from kiosk.services.events import CalendarEventRef, EventRef, LocalEventRef


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Reads


class PersonRead(Schema):
    id: str
    organization_id: str
    family_id: str | None
    first_name: str
    last_name: str
    role: PersonRole
    date_of_birth: date | None
    active: bool


class EventRead(Schema):
    id: str
    organization_id: str
    title: str
    description: str | None
    location: str | None
    status: EventStatus
    starts_at: datetime
    ends_at: datetime | None


class EventDetail(EventRead):
    attendance_count: int
    pickup_code_count: int


class AttendanceRead(Schema):
    id: str
    organization_id: str
    event_id: str
    person_id: str
    status: AttendanceStatus
    check_in_at: datetime | None
    check_out_at: datetime | None
    notes: str | None


class PickupCodeRead(Schema):
    id: str
    organization_id: str
    event_id: str
    youth_person_id: str
    code: str
    issued_at: datetime
    redeemed_at: datetime | None
    redeemed_by_adult_id: str | None


class PickupCodeDetail(PickupCodeRead):
    youth_person: PersonRead
    event: EventRead


class FamilyRead(Schema):
    id: str
    organization_id: str
    primary_phone_e164: str
    phone_last4: str
    masked_phone: str
    family_name: str
    people: list[PersonRead] = []


class CheckInResponse(Schema):
    attendance: AttendanceRead
    pickup_code: PickupCodeRead | None


class CheckInStatusResponse(Schema):
    family_id: str
    event_id: str
    checked_in_status: dict[str, AttendanceStatus]


class CheckoutResponse(Schema):
    attendance: AttendanceRead
    pickup_code: PickupCodeRead


class DeletedEventResponse(Schema):
    success: bool = True
    deleted_event: EventRead


class DeletedFamilyResponse(Schema):
    success: bool = True
    deleted_family: FamilyRead


class RetroactiveResponse(Schema):
    success: bool
    marked: int
    failed_event_ids: list[str] = []
    message: str | None = None


# Writes


class CheckInRequest(Schema):
    organization_id: str = Field(min_length=1)
    event_id: str = Field(min_length=1)
    person_id: str = Field(min_length=1)
    event_title: str | None = None
    event_location: str | None = None

    def event_ref(self) -> EventRef:
        """Calendar details travel with calendar-sourced events only."""
        if self.event_title or self.event_location:
            return CalendarEventRef(
                uid=self.event_id, title=self.event_title, location=self.event_location
            )
        return LocalEventRef(id=self.event_id)


class CheckoutRequest(Schema):
    organization_id: str = Field(min_length=1)
    pickup_code_id: str = Field(min_length=1)
    redeemed_by_adult_id: str | None = None


class FamilyCreate(Schema):
    organization_id: str = Field(min_length=1)
    primary_phone_e164: str = Field(min_length=1)
    family_name: str = Field(min_length=1)


class PersonCreate(Schema):
    organization_id: str = Field(min_length=1)
    family_id: str | None = None
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: PersonRole
    date_of_birth: date | None = None


class RetroactiveRequest(Schema):
    family_id: str = Field(min_length=1)
    event_ids: list[str]


class EventCreate(Schema):
    organization_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    starts_at: datetime
    description: str | None = None
    ends_at: datetime | None = None
    location: str | None = None


class EventUpdate(Schema):
    """Partial update; only the fields present in the body are applied."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    location: str | None = None
    status: EventStatus | None = None


class FamilyMember(Schema):
    id: str | None = None
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: PersonRole


class FamilyUpdate(Schema):
    family_name: str = Field(min_length=1)
    primary_phone_e164: str = Field(min_length=1)
    people: list[FamilyMember]
