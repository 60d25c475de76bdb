"""Test doubles and sample data shared by the hubwatch test modules."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from hubwatch.entries import Entry
from hubwatch.storage import MemoryStorage, StoreError

# a Wednesday, noon
NOW = datetime(2024, 3, 6, 12, 0, 0)


def make_entry(title: str, players: int, seen: datetime, **urls) -> Entry:
    return Entry.observed(title=title, last_seen=seen, players=players, **urls)


class RecordingStore(MemoryStorage):
    """MemoryStorage that logs every write and can be told to fail some calls."""

    def __init__(self, fail: Iterable[str] = ()) -> None:
        super().__init__()
        self.fail = set(fail)
        self.calls: List[tuple] = []

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail:
            raise StoreError(f"{name} rejected")

    def load_entries(self):
        self._maybe_fail("load_entries")
        return super().load_entries()

    def save_entries(self, entries):
        self.calls.append(("save_entries", list(entries)))
        self._maybe_fail("save_entries")
        super().save_entries(entries)

    def delete_entries(self, entries):
        self.calls.append(("delete_entries", list(entries)))
        self._maybe_fail("delete_entries")
        super().delete_entries(entries)

    def append_history(self, points):
        self.calls.append(("append_history", list(points)))
        self._maybe_fail("append_history")
        super().append_history(points)

    def writes(self, name: str) -> List[list]:
        return [args for call, args in self.calls if call == name]

    def all_points(self):
        return [point for batch in self.writes("append_history") for point in batch]


class ScriptedSource:
    """Returns queued results in order; exceptions in the queue are raised."""

    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls: List[datetime] = []

    def acquire(self, now: datetime) -> List[Entry]:
        self.calls.append(now)
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return [
            Entry.observed(title=title, last_seen=now, players=players)
            for title, players in result
        ]
