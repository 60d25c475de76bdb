"""Value types passed between the poller stages and the store."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict

from .utils import iso, make_id

# Title of the synthetic entry that tracks the global number of players.
META_TITLE = "_ss13.se"


@dataclass(frozen=True, slots=True)
class Entry:
    id: str
    title: str
    site_url: str
    game_url: str
    last_seen: datetime
    players: int

    @classmethod
    def observed(
        cls,
        title: str,
        last_seen: datetime,
        players: int,
        site_url: str = "",
        game_url: str = "",
    ) -> "Entry":
        return cls(
            id=make_id(title),
            title=title,
            site_url=site_url,
            game_url=game_url,
            last_seen=last_seen,
            players=max(0, int(players)),
        )

    @property
    def is_meta(self) -> bool:
        return self.title == META_TITLE

    def zeroed(self) -> "Entry":
        # last_seen keeps pointing at the last real observation
        return replace(self, players=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "site_url": self.site_url,
            "game_url": self.game_url,
            "last_seen": iso(self.last_seen),
            "players": self.players,
        }


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    time: datetime
    server_id: str
    players: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": iso(self.time),
            "server_id": self.server_id,
            "players": self.players,
        }
