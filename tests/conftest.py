"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from kiosk.core.database import get_session
from kiosk.main import app
from kiosk.models import Event, EventStatus, Family, Person, PersonRole
from tests.helpers import ORG_ID, RecordingAuditSink


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="audit")
def audit_fixture() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture(name="family")
def family_fixture(session: Session) -> Family:
    """A household with one adult and one youth."""
    family = Family(
        organization_id=ORG_ID,
        primary_phone_e164="+15551234567",
        phone_last4="4567",
        family_name="Smith",
    )
    session.add(family)
    session.flush()

    session.add(
        Person(
            id="adult-1",
            organization_id=ORG_ID,
            family_id=family.id,
            first_name="Jane",
            last_name="Smith",
            role=PersonRole.ADULT,
        )
    )
    session.add(
        Person(
            id="youth-1",
            organization_id=ORG_ID,
            family_id=family.id,
            first_name="John",
            last_name="Smith",
            role=PersonRole.YOUTH,
        )
    )
    session.commit()
    session.refresh(family)
    return family


@pytest.fixture(name="adult")
def adult_fixture(session: Session, family: Family) -> Person:
    return session.get(Person, "adult-1")


@pytest.fixture(name="youth")
def youth_fixture(session: Session, family: Family) -> Person:
    return session.get(Person, "youth-1")


@pytest.fixture(name="event")
def event_fixture(session: Session) -> Event:
    """A stored, active event."""
    event = Event(
        id="E1",
        organization_id=ORG_ID,
        title="Weekly Meeting",
        location="Fellowship Hall",
        status=EventStatus.ACTIVE,
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="make_youth")
def make_youth_fixture(session: Session):
    """Factory for extra youth without a household."""

    def make(person_id: str) -> Person:
        person = Person(
            id=person_id,
            organization_id=ORG_ID,
            first_name=person_id,
            last_name="Test",
            role=PersonRole.YOUTH,
        )
        session.add(person)
        session.commit()
        return person

    return make
