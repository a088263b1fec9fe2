"""Best-effort audit sink.

Check-in, checkout and admin writes record what they did here after their
own transaction has committed. A failure to write the audit row is logged
and never undoes or fails the primary operation.
"""
import json
import logging
from typing import Any, Protocol

from fastapi import Depends
from sqlmodel import Session

from kiosk.core.database import get_session
from kiosk.models import AuditLog

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    def record(self, organization_id: str, action: str, details: dict[str, Any]) -> None:
        ...


class DatabaseAuditSink:
    """Writes audit entries into the ``auditlog`` table."""

    def __init__(self, session: Session):
        self.session = session

    def record(self, organization_id: str, action: str, details: dict[str, Any]) -> None:
        entry = AuditLog(
            organization_id=organization_id,
            action=action,
            details=json.dumps(details, default=str),
        )
        self.session.add(entry)
        self.session.commit()


def record_action(
    sink: AuditSink, organization_id: str, action: str, details: dict[str, Any]
) -> bool:
    """
    Record an action without letting audit failures escape.

    Returns True if the entry was written.
    """
    try:
        sink.record(organization_id, action, details)
    except Exception:
        logger.exception(f"Failed to record audit entry {action}: {details}")
        if isinstance(sink, DatabaseAuditSink):
            sink.session.rollback()
        return False
    return True


def get_audit_sink(session: Session = Depends(get_session)) -> AuditSink:
    """Dependency for the request's audit sink."""
    return DatabaseAuditSink(session)
