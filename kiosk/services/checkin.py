"""Check-in service.

Orchestrates event resolution, the attendance upsert and, for youth, pickup
code issuance. Attendance is committed before the code is issued: if no
free code can be found the person stays CHECKED_IN and the error is
raised to the caller, who must treat the check-in as failed.
"""
import logging
from dataclasses import dataclass

from sqlmodel import Session

from kiosk.core.errors import NotFound, RetryExhausted, ValidationError
from kiosk.models import Attendance, AttendanceStatus, Person, PersonRole, PickupCode
from kiosk.services import attendance as attendance_store
from kiosk.services import pickup_codes as pickup_code_store
from kiosk.services.audit import AuditSink, record_action
from kiosk.services.directory import active_members, get_family
from kiosk.services.events import EventRef, resolve_or_create_event

logger = logging.getLogger(__name__)


@dataclass
class CheckInResult:
    attendance: Attendance
    pickup_code: PickupCode | None
    pickup_code_created: bool = False


def check_in(
    session: Session,
    audit: AuditSink,
    organization_id: str,
    person_id: str,
    event_ref: EventRef,
) -> CheckInResult:
    """
    Check a person into an event.

    Calling this again for the same person and event leaves them
    CHECKED_IN and returns the same unredeemed pickup code. Adults never
    receive a code.

    Raises:
        NotFound: The person or event does not exist in the organization.
        ValidationError: The person is inactive.
        RetryExhausted: No free pickup code could be generated.
    """
    person = session.get(Person, person_id)
    if not person or person.organization_id != organization_id:
        raise NotFound("Person not found")
    if not person.active:
        raise ValidationError("Person is not active")

    event = resolve_or_create_event(session, organization_id, event_ref)

    attendance = attendance_store.upsert_attendance(
        session,
        organization_id,
        event.id,
        person.id,
        AttendanceStatus.CHECKED_IN,
    )
    session.commit()

    pickup_code = None
    created = False
    if person.role == PersonRole.YOUTH:
        try:
            pickup_code, created = pickup_code_store.issue_code(
                session, organization_id, event.id, person.id
            )
        except RetryExhausted:
            session.rollback()
            logger.error(
                f"Could not issue pickup code for {person.id} at event {event.id}; "
                "attendance remains CHECKED_IN"
            )
            raise
        session.commit()

    logger.info(f"Checked in {person.display_name} ({person.role.value}) at event {event.id}")

    record_action(
        audit,
        organization_id,
        "CHECKIN",
        {
            "eventId": event.id,
            "personId": person.id,
            "pickupCodeId": pickup_code.id if pickup_code else None,
        },
    )

    return CheckInResult(attendance=attendance, pickup_code=pickup_code, pickup_code_created=created)


def family_status(
    session: Session, organization_id: str, event_id: str, family_id: str
) -> dict:
    """Attendance status of a household's active members at an event."""
    family = get_family(session, family_id)
    if family.organization_id != organization_id:
        raise NotFound("Family not found")
    person_ids = [person.id for person in active_members(family)]

    return {
        "family_id": family.id,
        "event_id": event_id,
        "checked_in_status": attendance_store.find_status_for_people(
            session, event_id, person_ids, organization_id=organization_id
        ),
    }
