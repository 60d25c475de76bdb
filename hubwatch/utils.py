"""Small helpers shared by the poller, the store and the API."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone

ID_LENGTH = 16


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def make_id(title: str) -> str:
    """Stable server ID: first 16 hex chars of the SHA-256 of the title."""
    return hashlib.sha256(title.encode("utf-8")).hexdigest()[:ID_LENGTH]


def iso(dt: datetime | None) -> str | None:
    if not dt:
        return None
    return dt.replace(microsecond=0).isoformat() + "Z"
