"""Stale server handling: decide which stored entries to zero or evict."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List

from ..entries import Entry
from ..storage import Storage

LOGGER = logging.getLogger("hubwatch.reconciler")

DEFAULT_RETENTION = timedelta(hours=72)


@dataclass
class ReconcilePlan:
    to_evict: List[Entry] = field(default_factory=list)
    to_zero: List[Entry] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.to_evict and not self.to_zero


def classify(
    now: datetime,
    stored: Iterable[Entry],
    retention: timedelta = DEFAULT_RETENTION,
    observed_ids: Iterable[str] = (),
) -> ReconcilePlan:
    """Split stored entries into evictions and zeroed copies.

    An entry not seen for longer than ``retention`` is evicted. Otherwise, if
    it was not refreshed at ``now`` (and is not part of the current snapshot)
    it is zeroed, keeping ``last_seen`` of its last real observation. Entries
    refreshed this cycle are left alone.
    """
    observed = set(observed_ids)
    plan = ReconcilePlan()
    for entry in stored:
        if now - entry.last_seen > retention:
            plan.to_evict.append(entry)
        elif entry.last_seen != now and entry.id not in observed:
            plan.to_zero.append(entry.zeroed())
    return plan


class Reconciler:
    def __init__(self, store: Storage, retention: timedelta = DEFAULT_RETENTION) -> None:
        self.store = store
        self.retention = retention

    def reconcile(self, now: datetime, snapshot: Iterable[Entry] = ()) -> ReconcilePlan:
        stored = self.store.load_entries()
        plan = classify(
            now,
            stored,
            retention=self.retention,
            observed_ids=(entry.id for entry in snapshot),
        )
        LOGGER.debug(
            "Reconciled %s stored entries: %s to evict, %s to zero",
            len(stored),
            len(plan.to_evict),
            len(plan.to_zero),
        )
        return plan
