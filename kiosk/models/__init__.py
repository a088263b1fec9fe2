from kiosk.models.attendance import Attendance, AttendanceStatus
from kiosk.models.audit_log import AuditLog
from kiosk.models.event import Event, EventStatus
from kiosk.models.family import Family
from kiosk.models.person import Person, PersonRole
from kiosk.models.pickup_code import PickupCode

__all__ = [
    "Attendance",
    "AttendanceStatus",
    "AuditLog",
    "Event",
    "EventStatus",
    "Family",
    "Person",
    "PersonRole",
    "PickupCode",
]
