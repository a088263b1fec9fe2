"""Tests for database models."""

from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from kiosk.models import (
    Attendance,
    AttendanceStatus,
    Event,
    EventStatus,
    Family,
    Person,
    PersonRole,
    PickupCode,
)
from tests.helpers import ORG_ID


class TestEventModel:
    """Tests for the Event model."""

    def test_create_event_defaults(self, session: Session):
        event = Event(organization_id=ORG_ID, title="Campout")
        session.add(event)
        session.commit()

        retrieved = session.get(Event, event.id)
        assert retrieved.status == EventStatus.DRAFT
        assert retrieved.starts_at is not None
        assert retrieved.ends_at is None

    def test_event_accepts_calendar_uid_as_id(self, session: Session):
        event = Event(id="abc123@calendar.example", organization_id=ORG_ID, title="Hike")
        session.add(event)
        session.commit()

        assert session.get(Event, "abc123@calendar.example") is not None


class TestFamilyModel:
    """Tests for the Family and Person models."""

    def test_family_people_relationship(self, session: Session, family: Family):
        names = sorted(person.first_name for person in family.people)
        assert names == ["Jane", "John"]

    def test_phone_unique_per_organization(self, session: Session, family: Family):
        session.add(
            Family(
                organization_id=ORG_ID,
                primary_phone_e164=family.primary_phone_e164,
                phone_last4="4567",
                family_name="Duplicate",
            )
        )
        with pytest.raises(IntegrityError):
            session.commit()

    def test_same_phone_other_organization(self, session: Session, family: Family):
        session.add(
            Family(
                organization_id="other-org",
                primary_phone_e164=family.primary_phone_e164,
                phone_last4="4567",
                family_name="Elsewhere",
            )
        )
        session.commit()

    def test_person_display_name(self, youth: Person):
        assert youth.display_name == "John Smith"
        assert youth.role == PersonRole.YOUTH
        assert youth.active is True


class TestAttendanceModel:
    """Tests for the Attendance model."""

    def test_one_row_per_event_and_person(self, session: Session, event: Event, youth: Person):
        for _ in range(2):
            session.add(
                Attendance(
                    organization_id=ORG_ID,
                    event_id=event.id,
                    person_id=youth.id,
                    status=AttendanceStatus.CHECKED_IN,
                )
            )
        with pytest.raises(IntegrityError):
            session.commit()

    def test_event_relationship(self, session: Session, event: Event, youth: Person):
        session.add(
            Attendance(
                organization_id=ORG_ID,
                event_id=event.id,
                person_id=youth.id,
                status=AttendanceStatus.CHECKED_IN,
            )
        )
        session.commit()
        session.refresh(event)

        assert len(event.attendances) == 1
        assert event.attendances[0].person_id == youth.id


class TestPickupCodeModel:
    """Tests for the PickupCode model."""

    def _code(self, event_id: str, youth_id: str, code: str) -> PickupCode:
        return PickupCode(
            organization_id=ORG_ID, event_id=event_id, youth_person_id=youth_id, code=code
        )

    def test_code_unique_within_event(self, session: Session, event: Event, youth: Person, make_youth):
        other = make_youth("youth-2")
        session.add(self._code(event.id, youth.id, "ABC"))
        session.add(self._code(event.id, other.id, "ABC"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_same_code_across_events(self, session: Session, event: Event, youth: Person):
        other_event = Event(id="E2", organization_id=ORG_ID, title="Other")
        session.add(other_event)
        session.add(self._code(event.id, youth.id, "ABC"))
        session.add(self._code(other_event.id, youth.id, "ABC"))
        session.commit()

        codes = session.exec(select(PickupCode).where(PickupCode.code == "ABC")).all()
        assert len(codes) == 2

    def test_new_code_is_unredeemed(self, session: Session, event: Event, youth: Person):
        pickup_code = self._code(event.id, youth.id, "XYZ")
        session.add(pickup_code)
        session.commit()

        assert pickup_code.redeemed_at is None
        assert pickup_code.is_redeemed is False

    def test_one_unredeemed_code_per_youth(self, session: Session, event: Event, youth: Person):
        session.add(self._code(event.id, youth.id, "ABC"))
        session.add(self._code(event.id, youth.id, "DEF"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_redeemed_code_allows_a_new_one(self, session: Session, event: Event, youth: Person):
        old = self._code(event.id, youth.id, "ABC")
        old.redeemed_at = datetime.now(UTC)
        session.add(old)
        session.add(self._code(event.id, youth.id, "DEF"))
        session.commit()

        codes = session.exec(select(PickupCode).where(PickupCode.youth_person_id == youth.id)).all()
        assert sorted(c.code for c in codes) == ["ABC", "DEF"]
