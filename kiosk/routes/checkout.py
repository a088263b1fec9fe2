"""Checkout routes used by the staff-supervised pickup station."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    EventRead,
    PersonRead,
    PickupCodeDetail,
    PickupCodeRead,
)
from kiosk.services import checkout
from kiosk.services.audit import AuditSink, get_audit_sink

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("", response_model=PickupCodeDetail)
async def lookup_pickup_code(
    code: str = Query(..., min_length=1),
    event_id: str = Query(..., alias="eventId", min_length=1),
    session: Session = Depends(get_session),
):
    """
    Look up a pickup code for confirmation before redeeming it.

    Case-insensitive. Returns 404 if no code matches at the event and 400
    if the code was already redeemed. Does not change any state.
    """
    found = checkout.lookup(session, event_id, code)
    base = PickupCodeRead.model_validate(found["pickup_code"])
    return PickupCodeDetail(
        **base.model_dump(),
        youth_person=PersonRead.model_validate(found["youth_person"]),
        event=EventRead.model_validate(found["event"]),
    )


@router.post("", response_model=CheckoutResponse)
async def redeem_pickup_code(
    body: CheckoutRequest,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """
    Redeem a pickup code and check the youth out.

    Succeeds at most once per code; later attempts return 400
    "Code already redeemed" without touching attendance.
    """
    result = checkout.redeem(
        session,
        audit,
        organization_id=body.organization_id,
        pickup_code_id=body.pickup_code_id,
        redeemed_by_adult_id=body.redeemed_by_adult_id,
    )
    return CheckoutResponse.model_validate(result, from_attributes=True)
