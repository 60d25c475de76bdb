"""Repository layer that encapsulates persistence logic."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence, Set, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from . import models
from .entries import Entry, HistoryPoint


class BaseRepository:
    def __init__(self, session: Session):
        self.session = session


def _to_entry(row: models.ServerRow) -> Entry:
    return Entry(
        id=row.id,
        title=row.title,
        site_url=row.site_url or "",
        game_url=row.game_url or "",
        last_seen=row.last_seen,
        players=row.players or 0,
    )


class ServerRepository(BaseRepository):
    def list_all(self) -> List[Entry]:
        stmt = select(models.ServerRow).order_by(models.ServerRow.title)
        return [_to_entry(row) for row in self.session.scalars(stmt)]

    def get(self, server_id: str) -> Entry | None:
        row = self.session.get(models.ServerRow, server_id)
        return _to_entry(row) if row else None

    def upsert(self, entry: Entry) -> models.ServerRow:
        row = self.session.get(models.ServerRow, entry.id)
        if row:
            row.title = entry.title
            row.site_url = entry.site_url
            row.game_url = entry.game_url
            row.last_seen = entry.last_seen
            row.players = entry.players
        else:
            row = models.ServerRow(
                id=entry.id,
                title=entry.title,
                site_url=entry.site_url,
                game_url=entry.game_url,
                last_seen=entry.last_seen,
                players=entry.players,
            )
            self.session.add(row)
        return row

    def upsert_many(self, entries: Iterable[Entry]) -> int:
        count = 0
        for entry in entries:
            self.upsert(entry)
            count += 1
        self.session.flush()
        return count

    def delete_many(self, server_ids: Sequence[str]) -> int:
        if not server_ids:
            return 0
        result = self.session.execute(
            delete(models.ServerRow).where(models.ServerRow.id.in_(list(server_ids)))
        )
        return result.rowcount or 0


class PointRepository(BaseRepository):
    def append_many(self, points: Sequence[HistoryPoint]) -> int:
        """Insert points, skipping any (server_id, time) pair already stored."""
        if not points:
            return 0
        times = {point.time for point in points}
        server_ids = {point.server_id for point in points}
        stmt = select(models.PointRow.server_id, models.PointRow.time).where(
            models.PointRow.time.in_(times),
            models.PointRow.server_id.in_(server_ids),
        )
        seen: Set[Tuple[str, datetime]] = {
            (server_id, time) for server_id, time in self.session.execute(stmt)
        }
        added = 0
        for point in points:
            key = (point.server_id, point.time)
            if key in seen:
                continue
            seen.add(key)
            self.session.add(
                models.PointRow(
                    time=point.time,
                    server_id=point.server_id,
                    players=point.players,
                )
            )
            added += 1
        self.session.flush()
        return added

    def window(
        self,
        server_id: str,
        since: datetime,
        until: datetime | None = None,
    ) -> List[HistoryPoint]:
        stmt = select(models.PointRow).where(
            models.PointRow.server_id == server_id,
            models.PointRow.time >= since,
        )
        if until is not None:
            stmt = stmt.where(models.PointRow.time <= until)
        stmt = stmt.order_by(models.PointRow.time.asc())
        return [
            HistoryPoint(time=row.time, server_id=row.server_id, players=row.players)
            for row in self.session.scalars(stmt)
        ]
