"""Shared column helpers for the kiosk tables."""

from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    """Text primary key; calendar uids are stored in the same column type."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)
