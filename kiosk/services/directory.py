"""Household directory: families, people and phone helpers."""
import logging
import re
from datetime import date

from sqlmodel import Session, select

from kiosk.core.errors import Conflict, NotFound, ValidationError
from kiosk.models import Family, Person, PersonRole
from kiosk.services import attendance as attendance_store
from kiosk.services import pickup_codes as pickup_code_store
from kiosk.services.audit import AuditSink, record_action

logger = logging.getLogger(__name__)


def _digits(phone: str) -> str:
    return re.sub(r"\D", "", phone)


def phone_last4(phone: str) -> str:
    """Extract the last four digits of a phone number."""
    return _digits(phone)[-4:]


def mask_phone_for_display(phone_e164: str) -> str:
    """Mask all but the last four digits, e.g. ``***-***-4567``."""
    return f"***-***-{phone_last4(phone_e164)}"


def normalize_phone_to_e164(phone: str) -> str:
    """
    Convert a phone number to E.164, assuming US numbers.

    Ten digits get a +1 prefix; eleven digits starting with 1 get a +.
    Anything else is returned as +digits.
    """
    digits = _digits(phone)
    if len(digits) == 10:
        return f"+1{digits}"
    return f"+{digits}"


def is_valid_phone(phone: str) -> bool:
    return len(_digits(phone)) >= 10


def get_family(session: Session, family_id: str) -> Family:
    family = session.get(Family, family_id)
    if not family:
        raise NotFound("Family not found")
    return family


def active_members(family: Family) -> list[Person]:
    """Active household members, adults first."""
    members = [person for person in family.people if person.active]
    return sorted(members, key=lambda person: person.role.value)


def search_families(
    session: Session, organization_id: str, last4: str | None = None
) -> list[Family]:
    """List families of an organization, optionally by phone last-4."""
    statement = select(Family).where(Family.organization_id == organization_id)

    if last4:
        if len(last4) != 4 or not last4.isdigit():
            raise ValidationError("phoneLast4 must be exactly 4 digits")
        statement = statement.where(Family.phone_last4 == last4)

    return list(session.exec(statement.order_by(Family.family_name)).all())


def create_family(
    session: Session,
    audit: AuditSink,
    organization_id: str,
    primary_phone: str,
    family_name: str,
) -> Family:
    if not is_valid_phone(primary_phone):
        raise ValidationError("Phone number must have at least 10 digits")

    phone = normalize_phone_to_e164(primary_phone)

    existing = session.exec(
        select(Family)
        .where(Family.organization_id == organization_id)
        .where(Family.primary_phone_e164 == phone)
    ).first()
    if existing:
        raise Conflict("Family with this phone number already exists")

    family = Family(
        organization_id=organization_id,
        primary_phone_e164=phone,
        phone_last4=phone_last4(phone),
        family_name=family_name.strip(),
    )
    session.add(family)
    session.commit()
    session.refresh(family)

    record_action(
        audit,
        organization_id,
        "FAMILY_CREATED",
        {"familyId": family.id, "familyName": family.family_name},
    )
    return family


def create_person(
    session: Session,
    audit: AuditSink,
    organization_id: str,
    first_name: str,
    last_name: str,
    role: PersonRole,
    family_id: str | None = None,
    date_of_birth: date | None = None,
) -> Person:
    if family_id is not None:
        get_family(session, family_id)

    person = Person(
        organization_id=organization_id,
        family_id=family_id,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=role,
        date_of_birth=date_of_birth,
    )
    session.add(person)
    session.commit()
    session.refresh(person)

    record_action(
        audit,
        organization_id,
        "PERSON_CREATED",
        {
            "personId": person.id,
            "firstName": person.first_name,
            "lastName": person.last_name,
            "role": person.role.value,
        },
    )
    return person


def list_people(
    session: Session, organization_id: str, role: PersonRole | None = None
) -> list[Person]:
    statement = select(Person).where(Person.organization_id == organization_id)
    if role is not None:
        statement = statement.where(Person.role == role)
    return list(session.exec(statement.order_by(Person.first_name)).all())


def update_family(
    session: Session,
    audit: AuditSink,
    family_id: str,
    family_name: str,
    primary_phone: str,
    members: list[dict],
) -> Family:
    """
    Replace a household's name, phone and member list.

    ``members`` holds dicts with ``first_name``, ``last_name``, ``role`` and,
    for existing people, ``id``. Entries without an id are created. People
    left out of the list are deactivated rather than deleted so their
    attendance history survives.

    Raises:
        NotFound: The family, or a member id outside it, does not exist.
        ValidationError: The phone number is invalid.
        Conflict: Another family of the organization has the phone.
    """
    family = get_family(session, family_id)

    if not is_valid_phone(primary_phone):
        raise ValidationError("Phone number must have at least 10 digits")
    phone = normalize_phone_to_e164(primary_phone)

    duplicate = session.exec(
        select(Family)
        .where(Family.organization_id == family.organization_id)
        .where(Family.primary_phone_e164 == phone)
        .where(Family.id != family.id)
    ).first()
    if duplicate:
        raise Conflict("Family with this phone number already exists")

    current = {person.id: person for person in family.people}
    kept = set()
    for member in members:
        person_id = member.get("id")
        if person_id:
            person = current.get(person_id)
            if person is None:
                raise NotFound(f"Person {person_id} is not in this family")
            kept.add(person_id)
        else:
            person = Person(organization_id=family.organization_id, family_id=family.id)
        person.first_name = member["first_name"].strip()
        person.last_name = member["last_name"].strip()
        person.role = member["role"]
        person.active = True
        session.add(person)

    removed = [person for person_id, person in current.items() if person_id not in kept]
    for person in removed:
        person.active = False
        session.add(person)

    family.family_name = family_name.strip()
    family.primary_phone_e164 = phone
    family.phone_last4 = phone_last4(phone)
    session.add(family)
    session.commit()
    session.refresh(family)

    logger.info(
        f"Updated family {family.id}: {len(members)} members, {len(removed)} deactivated"
    )
    record_action(
        audit,
        family.organization_id,
        "FAMILY_UPDATED",
        {"familyId": family.id, "deactivatedPersonIds": [p.id for p in removed]},
    )
    return family


def delete_family(session: Session, audit: AuditSink, family_id: str) -> int:
    """
    Delete a household and its people.

    Their pickup codes and attendance rows go first so the foreign keys
    never dangle. Returns the number of people removed.
    """
    family = get_family(session, family_id)
    organization_id = family.organization_id
    people = list(family.people)
    person_ids = [person.id for person in people]

    codes = pickup_code_store.delete_all_for_people(session, person_ids)
    rows = attendance_store.delete_all_for_people(session, person_ids)
    for person in people:
        session.delete(person)
    session.flush()
    session.expire(family, ["people"])
    session.delete(family)
    session.commit()

    logger.info(
        f"Deleted family {family_id} with {len(people)} people, "
        f"{rows} attendance rows and {codes} pickup codes"
    )
    record_action(
        audit,
        organization_id,
        "FAMILY_DELETED",
        {"familyId": family_id, "personIds": person_ids},
    )
    return len(people)
