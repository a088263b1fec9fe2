"""Attendance admin routes."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.schemas import RetroactiveRequest, RetroactiveResponse
from kiosk.services.attendance import mark_retroactive_attendance

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/retroactive", response_model=RetroactiveResponse)
async def retroactive_attendance(
    body: RetroactiveRequest,
    session: Session = Depends(get_session),
):
    """
    Mark a household as attended for past events.

    Event ids that are not stored locally come back in ``failedEventIds``.
    """
    return mark_retroactive_attendance(session, body.family_id, body.event_ids)
