"""Event resolution and admin operations.

Kiosks may refer to an event either by the id of a locally stored event or
by the uid of a calendar entry that has never been stored. Both shapes are
resolved into one canonical Event row before attendance is touched.
"""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import func
from sqlmodel import Session, select

from kiosk.core.config import settings
from kiosk.core.errors import NotFound, ValidationError
from kiosk.models import Attendance, Event, EventStatus, PickupCode
from kiosk.services import attendance as attendance_store
from kiosk.services import pickup_codes as pickup_code_store
from kiosk.services.audit import AuditSink, record_action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalEventRef:
    """An event the kiosk already knows by its stored id."""

    id: str
    title: str | None = None
    location: str | None = None


@dataclass(frozen=True)
class CalendarEventRef:
    """An event taken from a calendar feed, identified by its uid."""

    uid: str
    title: str | None = None
    location: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None


EventRef = LocalEventRef | CalendarEventRef


def event_ref_id(ref: EventRef) -> str:
    if isinstance(ref, CalendarEventRef):
        return ref.uid
    return ref.id


def resolve_or_create_event(session: Session, organization_id: str, ref: EventRef) -> Event:
    """
    Return the stored Event for a reference, creating a placeholder if needed.

    A missing event is created ACTIVE with the supplied title and location
    (or defaults) so attendance rows have a valid foreign key. An existing
    event is refreshed with the supplied title and location when a title is
    given. An event owned by another organization is reported as NotFound.
    Flushes but does not commit.
    """
    event_id = event_ref_id(ref)
    event = session.get(Event, event_id)
    if event is not None and event.organization_id != organization_id:
        raise NotFound("Event not found")

    if event is None:
        event = Event(
            id=event_id,
            organization_id=organization_id,
            title=ref.title or settings.default_event_title,
            location=ref.location,
            status=EventStatus.ACTIVE,
        )
        if isinstance(ref, CalendarEventRef):
            if ref.starts_at:
                event.starts_at = ref.starts_at
            event.ends_at = ref.ends_at
        session.add(event)
        session.flush()
        logger.info(f"Created placeholder event {event_id} ({event.title})")
        return event

    if ref.title:
        event.title = ref.title
        event.location = ref.location or event.location
        session.add(event)
        session.flush()

    return event


def list_events(
    session: Session, organization_id: str, status: EventStatus | None = None
) -> list[Event]:
    statement = select(Event).where(Event.organization_id == organization_id)
    if status is not None:
        statement = statement.where(Event.status == status)
    return list(session.exec(statement.order_by(Event.starts_at.desc())).all())


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite keeps no offset: stored times are UTC and come back naive."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _check_window(starts_at: datetime, ends_at: datetime | None):
    if ends_at is not None and _as_utc(ends_at) < _as_utc(starts_at):
        raise ValidationError("Event cannot end before it starts")


def create_event(
    session: Session,
    audit: AuditSink,
    organization_id: str,
    title: str,
    starts_at: datetime,
    description: str | None = None,
    ends_at: datetime | None = None,
    location: str | None = None,
) -> Event:
    """Create a staff-scheduled event. New events start out as DRAFT."""
    _check_window(starts_at, ends_at)

    event = Event(
        organization_id=organization_id,
        title=title.strip(),
        description=description,
        starts_at=_as_utc(starts_at),
        ends_at=_as_utc(ends_at),
        location=location,
        status=EventStatus.DRAFT,
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"Created event {event.id} ({event.title})")

    record_action(
        audit, organization_id, "EVENT_CREATED", {"eventId": event.id, "title": event.title}
    )
    return event


REQUIRED_EVENT_FIELDS = ("title", "starts_at", "status")
EDITABLE_EVENT_FIELDS = REQUIRED_EVENT_FIELDS + ("description", "ends_at", "location")


def update_event(session: Session, audit: AuditSink, event_id: str, changes: dict) -> Event:
    """
    Apply a partial update to an event.

    ``changes`` holds only the fields the caller sent. ``description``,
    ``ends_at`` and ``location`` may be cleared with None; the rest may not.
    Status moves freely between DRAFT, ACTIVE, COMPLETED and CANCELLED.
    """
    event = session.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")

    for field, value in changes.items():
        if field not in EDITABLE_EVENT_FIELDS:
            raise ValidationError(f"Unknown event field: {field}")
        if value is None and field in REQUIRED_EVENT_FIELDS:
            raise ValidationError(f"Invalid value for {field}: may not be empty")

    _check_window(changes.get("starts_at", event.starts_at), changes.get("ends_at", event.ends_at))

    for field, value in changes.items():
        if field in ("starts_at", "ends_at"):
            value = _as_utc(value)
        setattr(event, field, value)
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"Updated event {event_id}: {sorted(changes)}")

    record_action(
        audit,
        event.organization_id,
        "EVENT_UPDATED",
        {"eventId": event.id, "fields": sorted(changes)},
    )
    return event


def get_event_with_counts(session: Session, event_id: str) -> dict:
    """Event plus the number of attendance rows and pickup codes it owns."""
    event = session.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")

    attendance_count = session.exec(
        select(func.count()).select_from(Attendance).where(Attendance.event_id == event_id)
    ).one()
    pickup_code_count = session.exec(
        select(func.count()).select_from(PickupCode).where(PickupCode.event_id == event_id)
    ).one()

    return {
        "event": event,
        "attendance_count": attendance_count,
        "pickup_code_count": pickup_code_count,
    }


def delete_event(session: Session, event_id: str) -> dict:
    """
    Delete an event after its pickup codes and attendance rows.

    Children go first so the foreign keys never dangle.
    """
    event = session.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")

    deleted = event.model_dump()
    codes = pickup_code_store.delete_all_for_event(session, event_id)
    rows = attendance_store.delete_all_for_event(session, event_id)
    # Expire children so the delete does not see already-removed rows
    session.expire(event, ["attendances", "pickup_codes"])
    session.delete(event)
    session.commit()

    logger.info(f"Deleted event {event_id} with {rows} attendance rows and {codes} pickup codes")
    return deleted
