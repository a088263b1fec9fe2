"""Attendance store: one row per (event, person).

Functions here flush but do not commit; the calling service owns the
transaction boundary.
"""
import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from kiosk.core.errors import NotFound
from kiosk.models import Attendance, AttendanceStatus, Event, Family

logger = logging.getLogger(__name__)


def find_attendance(session: Session, event_id: str, person_id: str) -> Attendance | None:
    statement = (
        select(Attendance)
        .where(Attendance.event_id == event_id)
        .where(Attendance.person_id == person_id)
    )
    return session.exec(statement).first()


def upsert_attendance(
    session: Session,
    organization_id: str,
    event_id: str,
    person_id: str,
    status: AttendanceStatus,
    timestamp: datetime | None = None,
) -> Attendance:
    """
    Create or update the attendance row for a person at an event.

    Sets ``status`` and the timestamp that matches it: ``check_in_at`` for
    CHECKED_IN, ``check_out_at`` for CHECKED_OUT. The other timestamp is
    left alone. Repeating the call only advances the timestamp.

    A new row is inserted under a savepoint. If another writer inserted the
    row after our read, the insert hits ``UNIQUE(event_id, person_id)`` and
    this call updates the winner's row instead, so the last writer wins.
    """
    timestamp = timestamp or datetime.now(UTC)

    attendance = find_attendance(session, event_id, person_id)

    if attendance is None:
        attendance = Attendance(
            organization_id=organization_id,
            event_id=event_id,
            person_id=person_id,
            status=status,
        )
        try:
            with session.begin_nested():
                session.add(attendance)
        except IntegrityError:
            logger.info(f"Attendance for {person_id} at {event_id} was created concurrently")
            attendance = find_attendance(session, event_id, person_id)

    attendance.status = status
    if status == AttendanceStatus.CHECKED_IN:
        attendance.check_in_at = timestamp
    else:
        attendance.check_out_at = timestamp

    session.add(attendance)
    session.flush()
    return attendance


def find_status_for_people(
    session: Session,
    event_id: str,
    person_ids: Iterable[str],
    organization_id: str | None = None,
) -> dict[str, AttendanceStatus]:
    """
    Map person id -> attendance status for the requested people only.

    People without an attendance row at the event are omitted.
    """
    person_ids = list(person_ids)
    if not person_ids:
        return {}

    statement = (
        select(Attendance)
        .where(Attendance.event_id == event_id)
        .where(Attendance.person_id.in_(person_ids))
    )
    if organization_id is not None:
        statement = statement.where(Attendance.organization_id == organization_id)

    return {att.person_id: att.status for att in session.exec(statement).all()}


def delete_all_for_event(session: Session, event_id: str) -> int:
    """Delete every attendance row of an event. Returns the number removed."""
    rows = session.exec(select(Attendance).where(Attendance.event_id == event_id)).all()
    for attendance in rows:
        session.delete(attendance)
    session.flush()
    return len(rows)


def delete_all_for_people(session: Session, person_ids: list[str]) -> int:
    """Delete every attendance row of the given people, across events."""
    if not person_ids:
        return 0
    rows = session.exec(select(Attendance).where(Attendance.person_id.in_(person_ids))).all()
    for attendance in rows:
        session.delete(attendance)
    session.flush()
    return len(rows)


def mark_retroactive_attendance(
    session: Session, family_id: str, event_ids: list[str]
) -> dict:
    """
    Mark every active member of a family as attended for past events.

    Only events already stored locally are eligible; the rest are reported
    back in ``failed_event_ids``. No pickup codes are issued.
    """
    family = session.get(Family, family_id)
    if not family:
        raise NotFound("Family not found")

    if not event_ids:
        return {"success": True, "marked": 0, "failed_event_ids": []}

    people = [person for person in family.people if person.active]
    if not people:
        raise NotFound("No active people found in family")

    marked = 0
    failed_event_ids = []
    for event_id in event_ids:
        event = session.get(Event, event_id)
        if not event:
            failed_event_ids.append(event_id)
            continue

        for person in people:
            upsert_attendance(
                session,
                family.organization_id,
                event.id,
                person.id,
                AttendanceStatus.CHECKED_IN,
            )
            marked += 1

    session.commit()
    logger.info(
        f"Marked {marked} retroactive attendance records for family {family_id} "
        f"({len(failed_event_ids)} unknown events)"
    )

    return {
        "success": True,
        "marked": marked,
        "failed_event_ids": failed_event_ids,
        "message": f"Marked {marked} attendance records for {len(people)} family member(s)",
    }
