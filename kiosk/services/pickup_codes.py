"""Pickup code store: issuance, lookup and the one-time redemption gate."""
import logging
from datetime import UTC, datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from kiosk.core.config import settings
from kiosk.core.errors import AlreadyRedeemed, NotFound
from kiosk.models import PickupCode
from kiosk.pickup.codes import generate_code, normalize_code
from kiosk.pickup.retry import retry

logger = logging.getLogger(__name__)


def find_active_code(session: Session, event_id: str, youth_person_id: str) -> PickupCode | None:
    """Return the youth's unredeemed code at the event, if any."""
    statement = (
        select(PickupCode)
        .where(PickupCode.event_id == event_id)
        .where(PickupCode.youth_person_id == youth_person_id)
        .where(PickupCode.redeemed_at == None)  # noqa: E711
        .order_by(PickupCode.issued_at.desc())
    )
    return session.exec(statement).first()


def code_in_use(session: Session, event_id: str, code: str) -> bool:
    """Check whether a code value already exists at the event, redeemed or not."""
    statement = (
        select(PickupCode.id)
        .where(PickupCode.event_id == event_id)
        .where(PickupCode.code == code)
    )
    return session.exec(statement).first() is not None


def _insert_code(
    session: Session,
    organization_id: str,
    event_id: str,
    youth_person_id: str,
    code: str,
) -> PickupCode | None:
    """
    Insert a candidate code under a savepoint.

    Returns None when the value is already taken, either by the lookup or by
    a unique-constraint violation from a concurrent insert. The savepoint
    keeps the caller's transaction usable after a violation.
    """
    if code_in_use(session, event_id, code):
        return None

    pickup_code = PickupCode(
        organization_id=organization_id,
        event_id=event_id,
        youth_person_id=youth_person_id,
        code=code,
    )
    try:
        with session.begin_nested():
            session.add(pickup_code)
    except IntegrityError:
        logger.warning(f"Insert of pickup code {code} at event {event_id} lost a race")
        return None
    return pickup_code


def issue_code(
    session: Session,
    organization_id: str,
    event_id: str,
    youth_person_id: str,
) -> tuple[PickupCode, bool]:
    """
    Get or create the pickup code for a youth at an event.

    An unredeemed code is reused. When the youth has no code, or only
    redeemed ones from an earlier checkout, a fresh code is generated and
    checked against every code at the event. Every attempt looks for an
    unredeemed code first, so a concurrent issuance for the same youth is
    returned instead of duplicated. Returns ``(code, created)``.

    Raises RetryExhausted if no free code is found within
    ``settings.pickup_code_max_attempts`` tries. No row is written then.
    """

    def attempt() -> tuple[PickupCode | None, bool]:
        existing = find_active_code(session, event_id, youth_person_id)
        if existing:
            return existing, False
        candidate = generate_code(settings.pickup_code_length)
        return _insert_code(session, organization_id, event_id, youth_person_id, candidate), True

    pickup_code, created = retry(
        attempt,
        max_attempts=settings.pickup_code_max_attempts,
        is_acceptable=lambda outcome: outcome[0] is not None,
    )
    if created:
        logger.info(
            f"Issued pickup code {pickup_code.code} for youth {youth_person_id} at event {event_id}"
        )
    return pickup_code, created


def lookup_code(session: Session, event_id: str, code: str) -> PickupCode:
    """
    Find an unredeemed pickup code by its value. Read-only.

    Matching is case-insensitive. Raises NotFound when no code matches and
    AlreadyRedeemed when the code has been used.
    """
    statement = (
        select(PickupCode)
        .where(PickupCode.event_id == event_id)
        .where(PickupCode.code == normalize_code(code))
    )
    pickup_code = session.exec(statement).first()

    if not pickup_code:
        raise NotFound("Pickup code not found")
    if pickup_code.is_redeemed:
        raise AlreadyRedeemed()
    return pickup_code


def claim_code(
    session: Session,
    pickup_code_id: str,
    redeemed_by_adult_id: str | None,
    redeemed_at: datetime | None = None,
) -> bool:
    """
    Mark a code redeemed if, and only if, it is still unredeemed.

    A single conditional UPDATE, so of two concurrent claims exactly one
    sees a matched row. Returns True when this call claimed the code.
    """
    statement = (
        update(PickupCode)
        .where(PickupCode.id == pickup_code_id)
        .where(PickupCode.redeemed_at == None)  # noqa: E711
        .values(
            redeemed_at=redeemed_at or datetime.now(UTC),
            redeemed_by_adult_id=redeemed_by_adult_id,
        )
        .execution_options(synchronize_session=False)
    )
    result = session.exec(statement)
    return result.rowcount == 1


def delete_all_for_event(session: Session, event_id: str) -> int:
    """Delete every pickup code of an event. Returns the number removed."""
    rows = session.exec(select(PickupCode).where(PickupCode.event_id == event_id)).all()
    for pickup_code in rows:
        session.delete(pickup_code)
    session.flush()
    return len(rows)


def delete_all_for_people(session: Session, person_ids: list[str]) -> int:
    """
    Delete the codes issued to the given youth and detach the given adults.

    Codes those adults redeemed for other youth stay, with
    ``redeemed_by_adult_id`` cleared. Returns the number of codes removed.
    """
    if not person_ids:
        return 0

    session.exec(
        update(PickupCode)
        .where(PickupCode.redeemed_by_adult_id.in_(person_ids))
        .values(redeemed_by_adult_id=None)
        .execution_options(synchronize_session=False)
    )
    rows = session.exec(
        select(PickupCode).where(PickupCode.youth_person_id.in_(person_ids))
    ).all()
    for pickup_code in rows:
        session.delete(pickup_code)
    session.flush()
    return len(rows)
