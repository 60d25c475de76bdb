"""Store contract used by the poller, with SQL and in-memory backends.

Every call is a blocking, self-contained unit: the SQL backend opens one
session per call so that API readers never share state with the poller
thread. Failures are raised as ``StoreError``.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict, List, Protocol, Sequence, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError

from .database import Database
from .entries import Entry, HistoryPoint
from .repositories import PointRepository, ServerRepository

LOGGER = logging.getLogger("hubwatch.storage")


class StoreError(Exception):
    pass


class Storage(Protocol):
    def load_entries(self) -> List[Entry]: ...

    def save_entries(self, entries: Sequence[Entry]) -> None: ...

    def delete_entries(self, entries: Sequence[Entry]) -> None: ...

    def append_history(self, points: Sequence[HistoryPoint]) -> None: ...

    def get_entry(self, server_id: str) -> Entry | None: ...

    def history(
        self, server_id: str, since: datetime, until: datetime | None = None
    ) -> List[HistoryPoint]: ...


class SqlStorage:
    def __init__(self, database: Database) -> None:
        self.database = database

    def _run(self, action: str, func):
        try:
            with self.database.session() as session:
                return func(session)
        except SQLAlchemyError as exc:
            raise StoreError(f"{action} failed: {exc}") from exc

    def load_entries(self) -> List[Entry]:
        return self._run("load entries", lambda s: ServerRepository(s).list_all())

    def save_entries(self, entries: Sequence[Entry]) -> None:
        count = self._run(
            "save entries", lambda s: ServerRepository(s).upsert_many(entries)
        )
        LOGGER.debug("Saved %s entries", count)

    def delete_entries(self, entries: Sequence[Entry]) -> None:
        ids = [entry.id for entry in entries]
        count = self._run("delete entries", lambda s: ServerRepository(s).delete_many(ids))
        LOGGER.debug("Deleted %s entries", count)

    def append_history(self, points: Sequence[HistoryPoint]) -> None:
        count = self._run(
            "append history", lambda s: PointRepository(s).append_many(points)
        )
        LOGGER.debug("Appended %s of %s history points", count, len(points))

    def get_entry(self, server_id: str) -> Entry | None:
        return self._run("get entry", lambda s: ServerRepository(s).get(server_id))

    def history(
        self, server_id: str, since: datetime, until: datetime | None = None
    ) -> List[HistoryPoint]:
        return self._run(
            "load history",
            lambda s: PointRepository(s).window(server_id, since, until),
        )


class MemoryStorage:
    """Thread-safe in-memory store with the same semantics as ``SqlStorage``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, Entry] = {}
        self._points: List[HistoryPoint] = []
        self._point_keys: Set[Tuple[str, datetime]] = set()

    def load_entries(self) -> List[Entry]:
        with self._lock:
            return sorted(self._entries.values(), key=lambda entry: entry.title)

    def save_entries(self, entries: Sequence[Entry]) -> None:
        with self._lock:
            for entry in entries:
                self._entries[entry.id] = entry

    def delete_entries(self, entries: Sequence[Entry]) -> None:
        with self._lock:
            for entry in entries:
                self._entries.pop(entry.id, None)

    def append_history(self, points: Sequence[HistoryPoint]) -> None:
        with self._lock:
            for point in points:
                key = (point.server_id, point.time)
                if key in self._point_keys:
                    continue
                self._point_keys.add(key)
                self._points.append(point)

    def get_entry(self, server_id: str) -> Entry | None:
        with self._lock:
            return self._entries.get(server_id)

    def history(
        self, server_id: str, since: datetime, until: datetime | None = None
    ) -> List[HistoryPoint]:
        with self._lock:
            points = [
                point
                for point in self._points
                if point.server_id == server_id
                and point.time >= since
                and (until is None or point.time <= until)
            ]
        return sorted(points, key=lambda point: point.time)
