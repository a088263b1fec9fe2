"""Constants and test doubles shared by the test modules."""

from sqlmodel import Session, select

from kiosk.models import AuditLog

ORG_ID = "test-org"


class RecordingAuditSink:
    """Audit sink that keeps entries in memory."""

    def __init__(self):
        self.entries = []

    def record(self, organization_id, action, details):
        self.entries.append((organization_id, action, details))

    @property
    def actions(self) -> list[str]:
        return [action for _, action, _ in self.entries]


class FailingAuditSink:
    """Audit sink whose store is down."""

    def record(self, organization_id, action, details):
        raise RuntimeError("audit store unavailable")


def audit_actions(session: Session) -> list[str]:
    """Actions written to the audit table, oldest first."""
    entries = session.exec(select(AuditLog).order_by(AuditLog.created_at)).all()
    return [entry.action for entry in entries]
