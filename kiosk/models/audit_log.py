"""Append-only audit trail of kiosk and admin actions.

Rows are written and never read back by the check-in or checkout logic.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from kiosk.models.base import new_id, utcnow


class AuditLog(SQLModel, table=True):
    """One recorded action.

    Attributes:
        id: Unique identifier.
        organization_id: Organization the action belongs to.
        action: Action kind, e.g. "CHECKIN", "CHECKOUT", "FAMILY_CREATED".
        details: JSON-encoded payload describing the action.
        created_at: When the action was recorded.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    organization_id: str = Field(index=True)
    action: str = Field(index=True)
    details: str = "{}"
    created_at: datetime = Field(default_factory=utcnow)
