"""Checkout service: confirm a pickup code, then redeem it exactly once."""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlmodel import Session

from kiosk.core.errors import AlreadyRedeemed, NotFound
from kiosk.models import Attendance, AttendanceStatus, Event, Person, PickupCode
from kiosk.services import attendance as attendance_store
from kiosk.services import pickup_codes as pickup_code_store
from kiosk.services.audit import AuditSink, record_action

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    attendance: Attendance
    pickup_code: PickupCode


def lookup(session: Session, event_id: str, code: str) -> dict:
    """
    Look up a code for the confirmation screen. Never mutates state.

    Returns the pickup code with its youth and event.
    """
    pickup_code = pickup_code_store.lookup_code(session, event_id, code)
    return {
        "pickup_code": pickup_code,
        "youth_person": session.get(Person, pickup_code.youth_person_id),
        "event": session.get(Event, pickup_code.event_id),
    }


def redeem(
    session: Session,
    audit: AuditSink,
    organization_id: str,
    pickup_code_id: str,
    redeemed_by_adult_id: str | None = None,
) -> CheckoutResult:
    """
    Redeem a pickup code and check the youth out.

    The code is claimed with a conditional update that only matches while
    ``redeemed_at`` is NULL, and the attendance flip is committed in the same
    transaction. A second redeem of the same code, concurrent or later,
    raises AlreadyRedeemed and leaves attendance untouched.

    Raises:
        NotFound: The code or the redeeming adult does not exist in the
            organization.
        AlreadyRedeemed: The code was already used.
    """
    pickup_code = session.get(PickupCode, pickup_code_id)
    if not pickup_code or pickup_code.organization_id != organization_id:
        raise NotFound("Pickup code not found")
    if pickup_code.is_redeemed:
        raise AlreadyRedeemed()
    if redeemed_by_adult_id:
        adult = session.get(Person, redeemed_by_adult_id)
        if not adult or adult.organization_id != organization_id:
            raise NotFound("Adult not found")

    now = datetime.now(UTC)
    if not pickup_code_store.claim_code(session, pickup_code_id, redeemed_by_adult_id, now):
        session.rollback()
        logger.warning(f"Pickup code {pickup_code_id} was redeemed concurrently")
        raise AlreadyRedeemed()

    attendance = attendance_store.upsert_attendance(
        session,
        pickup_code.organization_id,
        pickup_code.event_id,
        pickup_code.youth_person_id,
        AttendanceStatus.CHECKED_OUT,
        timestamp=now,
    )
    session.commit()
    session.refresh(pickup_code)

    logger.info(
        f"Redeemed pickup code {pickup_code.code} for youth {pickup_code.youth_person_id} "
        f"at event {pickup_code.event_id}"
    )

    record_action(
        audit,
        organization_id,
        "CHECKOUT",
        {
            "pickupCodeId": pickup_code.id,
            "personId": pickup_code.youth_person_id,
            "eventId": pickup_code.event_id,
            "redeemedByAdultId": redeemed_by_adult_id,
        },
    )

    return CheckoutResult(attendance=attendance, pickup_code=pickup_code)
