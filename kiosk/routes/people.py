"""People routes for staff data entry."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.models import PersonRole
from kiosk.schemas import PersonCreate, PersonRead
from kiosk.services import directory
from kiosk.services.audit import AuditSink, get_audit_sink

router = APIRouter(prefix="/people", tags=["people"])


@router.post("", response_model=PersonRead, status_code=201)
async def create_person(
    body: PersonCreate,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """Add a person, optionally as a member of a household."""
    person = directory.create_person(
        session,
        audit,
        organization_id=body.organization_id,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        family_id=body.family_id,
        date_of_birth=body.date_of_birth,
    )
    return PersonRead.model_validate(person)


@router.get("", response_model=list[PersonRead])
async def list_people(
    organization_id: str = Query(..., alias="organizationId", min_length=1),
    role: PersonRole | None = None,
    session: Session = Depends(get_session),
):
    """List an organization's people by first name, optionally by role."""
    return [
        PersonRead.model_validate(person)
        for person in directory.list_people(session, organization_id, role)
    ]
