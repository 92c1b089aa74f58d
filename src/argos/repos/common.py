from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def utcnow_iso() -> str:
    """Server timestamp, UTC, millisecond precision, `Z` suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def new_id() -> str:
    return str(uuid4())
