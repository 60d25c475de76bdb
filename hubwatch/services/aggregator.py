"""Builds the synthetic hub entry that tracks the global player count."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable

from ..entries import META_TITLE, Entry
from ..utils import make_id


def make_meta_entry(now: datetime, entries: Iterable[Entry]) -> Entry:
    total = sum(entry.players for entry in entries if not entry.is_meta)
    return Entry(
        id=make_id(META_TITLE),
        title=META_TITLE,
        site_url="",
        game_url="",
        last_seen=now,
        players=total,
    )


class MetaEntryHolder:
    """Latest hub entry, written by the poller thread and read by API handlers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entry: Entry | None = None

    def publish(self, entry: Entry) -> None:
        with self._lock:
            self._entry = entry

    def current(self) -> Entry | None:
        with self._lock:
            return self._entry
