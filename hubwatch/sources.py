"""Snapshot sources: where the list of currently live servers comes from."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Protocol

import requests
from requests import Session

from .entries import Entry

LOGGER = logging.getLogger("hubwatch.source")


class SnapshotError(Exception):
    pass


class SnapshotSource(Protocol):
    def acquire(self, now: datetime) -> List[Entry]: ...


def _player_count(value: Any) -> int:
    if isinstance(value, (list, tuple)):
        return len(value)
    if value is None or value == "":
        return 0
    return max(0, int(value))


def parse_feed(now: datetime, data: Any) -> List[Entry]:
    """Turn a decoded feed document into entries stamped with ``now``.

    Accepts a list of server objects or ``{"servers": [...]}``. Items without a
    title are skipped; repeated titles keep the highest player count.
    """
    if isinstance(data, dict):
        data = data.get("servers")
    if not isinstance(data, list):
        raise SnapshotError("feed must be a list of servers")

    by_title: Dict[str, Entry] = {}
    for item in data:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        if not title:
            continue
        try:
            players = _player_count(item.get("players"))
        except (TypeError, ValueError, OverflowError) as exc:
            raise SnapshotError(f"bad player count for {title!r}: {exc}") from exc
        entry = Entry.observed(
            title=title,
            last_seen=now,
            players=players,
            site_url=str(item.get("site_url") or ""),
            game_url=str(item.get("game_url") or ""),
        )
        current = by_title.get(title)
        if current is None or entry.players > current.players:
            by_title[title] = entry
    return list(by_title.values())


class FeedSource:
    """Fetches a JSON server list over HTTP."""

    def __init__(self, url: str, timeout: timedelta, session: Session) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session

    def acquire(self, now: datetime) -> List[Entry]:
        if not self.url:
            raise SnapshotError("no source URL configured")
        try:
            response = self.session.get(self.url, timeout=self.timeout.total_seconds())
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise SnapshotError(f"fetching {self.url} failed: {exc}") from exc
        entries = parse_feed(now, data)
        LOGGER.debug("Feed %s returned %s servers", self.url, len(entries))
        return entries


class StaticSource:
    """Serves a fixed server list; every call re-stamps it with ``now``."""

    def __init__(self, servers: Iterable[dict]) -> None:
        self.servers = list(servers)

    def acquire(self, now: datetime) -> List[Entry]:
        return parse_feed(now, self.servers)
