"""Check-in routes used by the kiosk roster screen."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.schemas import CheckInRequest, CheckInResponse, CheckInStatusResponse
from kiosk.services.audit import AuditSink, get_audit_sink
from kiosk.services.checkin import check_in, family_status

router = APIRouter(prefix="/checkin", tags=["checkin"])


@router.post("", response_model=CheckInResponse, status_code=201)
async def create_checkin(
    body: CheckInRequest,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """
    Check a person into an event.

    Creates a placeholder event when the id is not stored yet. Youth get a
    pickup code; adults get ``pickupCode: null``. Returns 404 if the person
    does not exist in the organization.
    """
    result = check_in(
        session,
        audit,
        organization_id=body.organization_id,
        person_id=body.person_id,
        event_ref=body.event_ref(),
    )
    return CheckInResponse.model_validate(result, from_attributes=True)


@router.get("/status", response_model=CheckInStatusResponse)
async def checkin_status(
    organization_id: str = Query(..., alias="organizationId", min_length=1),
    event_id: str = Query(..., alias="eventId", min_length=1),
    family_id: str = Query(..., alias="familyId", min_length=1),
    session: Session = Depends(get_session),
):
    """
    Attendance status of every active household member at an event.

    Members without attendance are omitted from ``checkedInStatus``.
    """
    return family_status(session, organization_id, event_id, family_id)
