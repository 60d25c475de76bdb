"""History recorder: one player-count point per entry per cycle."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from ..entries import Entry, HistoryPoint
from ..storage import Storage


def build_points(now: datetime, entries: Iterable[Entry]) -> List[HistoryPoint]:
    return [
        HistoryPoint(time=now, server_id=entry.id, players=entry.players)
        for entry in entries
    ]


class HistoryRecorder:
    def __init__(self, store: Storage) -> None:
        self.store = store

    def record(self, now: datetime, entries: Iterable[Entry]) -> List[HistoryPoint]:
        points = build_points(now, entries)
        if points:
            self.store.append_history(points)
        return points
