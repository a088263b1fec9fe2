"""Household lookup and registration routes."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.models import Family
from kiosk.schemas import DeletedFamilyResponse, FamilyCreate, FamilyRead, FamilyUpdate, PersonRead
from kiosk.services import directory
from kiosk.services.audit import AuditSink, get_audit_sink

router = APIRouter(prefix="/families", tags=["families"])


def family_read(family: Family) -> FamilyRead:
    return FamilyRead(
        id=family.id,
        organization_id=family.organization_id,
        primary_phone_e164=family.primary_phone_e164,
        phone_last4=family.phone_last4,
        masked_phone=directory.mask_phone_for_display(family.primary_phone_e164),
        family_name=family.family_name,
        people=[PersonRead.model_validate(p) for p in directory.active_members(family)],
    )


@router.get("", response_model=list[FamilyRead])
async def search_families(
    organization_id: str = Query(..., alias="organizationId", min_length=1),
    phone_last4: str | None = Query(None, alias="phoneLast4"),
    session: Session = Depends(get_session),
):
    """
    Search families by the last four digits of their phone.

    Without ``phoneLast4`` every family of the organization is returned.
    Only active members are included.
    """
    families = directory.search_families(session, organization_id, phone_last4)
    return [family_read(family) for family in families]


@router.post("", response_model=FamilyRead, status_code=201)
async def create_family(
    body: FamilyCreate,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """Register a household. Returns 409 if the phone is already registered."""
    family = directory.create_family(
        session,
        audit,
        organization_id=body.organization_id,
        primary_phone=body.primary_phone_e164,
        family_name=body.family_name,
    )
    return family_read(family)


@router.get("/{family_id}", response_model=FamilyRead)
async def get_family(family_id: str, session: Session = Depends(get_session)):
    """A household with its active members."""
    return family_read(directory.get_family(session, family_id))


@router.get("/{family_id}/members", response_model=list[PersonRead])
async def list_members(family_id: str, session: Session = Depends(get_session)):
    """Active household members, adults first."""
    family = directory.get_family(session, family_id)
    return [PersonRead.model_validate(p) for p in directory.active_members(family)]


@router.patch("/{family_id}", response_model=FamilyRead)
async def update_family(
    family_id: str,
    body: FamilyUpdate,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """
    Edit a household and its member list.

    Members sent without an ``id`` are added. Members left out are
    deactivated, keeping their attendance history.
    """
    family = directory.update_family(
        session,
        audit,
        family_id,
        family_name=body.family_name,
        primary_phone=body.primary_phone_e164,
        members=[member.model_dump() for member in body.people],
    )
    return family_read(family)


@router.delete("/{family_id}", response_model=DeletedFamilyResponse)
async def delete_family(
    family_id: str,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """Delete a household, its people and their attendance and pickup codes."""
    deleted = family_read(directory.get_family(session, family_id))
    directory.delete_family(session, audit, family_id)
    return DeletedFamilyResponse(deleted_family=deleted)
