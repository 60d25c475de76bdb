"""Read-side queries over the stored history for the API."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List

from ..entries import HistoryPoint
from ..storage import Storage

DAY = timedelta(hours=24)
WEEK = timedelta(days=7)
AVERAGE_WINDOW = timedelta(days=28)


def _mean(values: List[int]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


def average_by_weekday(points: List[HistoryPoint]) -> List[dict]:
    buckets: Dict[int, List[int]] = defaultdict(list)
    for point in points:
        buckets[point.time.weekday()].append(point.players)
    return [
        {"day": calendar.day_name[day], "players": _mean(buckets.get(day, []))}
        for day in range(7)
    ]


def average_by_hour(points: List[HistoryPoint]) -> List[dict]:
    buckets: Dict[int, List[int]] = defaultdict(list)
    for point in points:
        buckets[point.time.hour].append(point.players)
    return [
        {"hour": hour, "players": _mean(buckets.get(hour, []))}
        for hour in range(24)
    ]


class StatsService:
    def __init__(self, store: Storage) -> None:
        self.store = store

    def recent(self, server_id: str, now: datetime, span: timedelta) -> List[HistoryPoint]:
        return self.store.history(server_id, since=now - span, until=now)

    def daily(self, server_id: str, now: datetime) -> List[HistoryPoint]:
        return self.recent(server_id, now, DAY)

    def weekly(self, server_id: str, now: datetime) -> List[HistoryPoint]:
        return self.recent(server_id, now, WEEK)

    def average_daily(self, server_id: str, now: datetime) -> List[dict]:
        return average_by_weekday(self.recent(server_id, now, AVERAGE_WINDOW))

    def average_hourly(self, server_id: str, now: datetime) -> List[dict]:
        return average_by_hour(self.recent(server_id, now, AVERAGE_WINDOW))
