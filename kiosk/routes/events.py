"""Event admin routes."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.models import EventStatus
from kiosk.schemas import DeletedEventResponse, EventCreate, EventDetail, EventRead, EventUpdate
from kiosk.services import events as event_service
from kiosk.services.audit import AuditSink, get_audit_sink

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=list[EventRead])
async def list_events(
    organization_id: str = Query(..., alias="organizationId", min_length=1),
    status: EventStatus | None = Query(None),
    session: Session = Depends(get_session),
):
    """List an organization's events, most recent start first."""
    return [
        EventRead.model_validate(event)
        for event in event_service.list_events(session, organization_id, status)
    ]


@router.post("", response_model=EventRead, status_code=201)
async def create_event(
    body: EventCreate,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """Schedule an event. It stays DRAFT until staff activate it."""
    event = event_service.create_event(
        session,
        audit,
        organization_id=body.organization_id,
        title=body.title,
        starts_at=body.starts_at,
        description=body.description,
        ends_at=body.ends_at,
        location=body.location,
    )
    return EventRead.model_validate(event)


@router.get("/{event_id}", response_model=EventDetail)
async def get_event(event_id: str, session: Session = Depends(get_session)):
    """Event detail with attendance and pickup code counts."""
    detail = event_service.get_event_with_counts(session, event_id)
    base = EventRead.model_validate(detail["event"])
    return EventDetail(
        **base.model_dump(),
        attendance_count=detail["attendance_count"],
        pickup_code_count=detail["pickup_code_count"],
    )


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: str,
    body: EventUpdate,
    session: Session = Depends(get_session),
    audit: AuditSink = Depends(get_audit_sink),
):
    """
    Update an event's details or move it through its lifecycle.

    Only fields present in the body change; ``endsAt: null`` clears the end
    time.
    """
    changes = body.model_dump(exclude_unset=True)
    event = event_service.update_event(session, audit, event_id, changes)
    return EventRead.model_validate(event)


@router.delete("/{event_id}", response_model=DeletedEventResponse)
async def delete_event(event_id: str, session: Session = Depends(get_session)):
    """
    Delete an event.

    Pickup codes and attendance rows are removed first so foreign keys
    stay valid.
    """
    deleted = event_service.delete_event(session, event_id)
    return DeletedEventResponse(deleted_event=EventRead.model_validate(deleted))
