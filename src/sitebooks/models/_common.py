"""Column helpers shared by the ledger tables."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Return a fresh opaque identifier (UUID4 string)."""

    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
