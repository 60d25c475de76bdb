"""Background poller driving scrape -> persist -> reconcile cycles.

Design:
- One daemon thread runs ``run_forever``; each tick moves IDLE -> SCRAPING -> IDLE.
- The wait between cycles starts when a cycle finishes, so a slow scrape
  delays the next one instead of overlapping it.
- Every cycle is independent. A failed scrape means no writes for that cycle;
  a failed store call is logged and the remaining steps still run.
- The next tick is the only retry.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List

from ..entries import Entry
from ..sources import SnapshotError, SnapshotSource
from ..storage import Storage, StoreError
from ..utils import utc_now
from .aggregator import MetaEntryHolder, make_meta_entry
from .history import HistoryRecorder
from .reconciler import DEFAULT_RETENTION, Reconciler

LOGGER = logging.getLogger("hubwatch.scheduler")


class CycleState(str, enum.Enum):
    IDLE = "idle"
    SCRAPING = "scraping"


@dataclass
class CycleReport:
    now: datetime
    ok: bool = False
    servers: int = 0
    players: int = 0
    evicted: int = 0
    zeroed: int = 0
    errors: List[str] = field(default_factory=list)
    duration: float = 0.0


class PollScheduler:
    def __init__(
        self,
        source: SnapshotSource,
        store: Storage,
        interval: timedelta,
        retention: timedelta = DEFAULT_RETENTION,
        hub: MetaEntryHolder | None = None,
        clock: Callable[[], datetime] = utc_now,
        wait: Callable[[float], bool] | None = None,
    ) -> None:
        self.source = source
        self.store = store
        self.interval = interval
        self.hub = hub or MetaEntryHolder()
        self.clock = clock
        self.reconciler = Reconciler(store, retention)
        self.recorder = HistoryRecorder(store)
        self._stop = threading.Event()
        self._wait = wait or self._stop.wait
        self._cycle_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._state = CycleState.IDLE
        self._last_report: CycleReport | None = None

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def last_report(self) -> CycleReport | None:
        return self._last_report

    def start(self) -> None:
        if self._thread:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="hubwatch-poller", daemon=True
        )
        self._thread.start()
        LOGGER.info("Poller started, interval %ss", self.interval.total_seconds())

    def stop(self) -> None:
        if self._thread:
            self._stop.set()
            self._thread.join(timeout=2)
            self._thread = None

    def run_forever(self, max_cycles: int | None = None) -> None:
        cycles = 0
        while not self._stop.is_set():
            try:
                self.run_cycle()
            except Exception as exc:  # noqa: BLE001 - the loop must survive anything
                LOGGER.exception("Poll cycle crashed: %s", exc)
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            if self._wait(self.interval.total_seconds()):
                break

    def run_cycle(self, now: datetime | None = None) -> CycleReport:
        with self._cycle_lock:
            self._state = CycleState.SCRAPING
            try:
                report = self._cycle(now or self.clock())
            finally:
                self._state = CycleState.IDLE
            self._last_report = report
            return report

    def _cycle(self, now: datetime) -> CycleReport:
        report = CycleReport(now=now)
        started = time.perf_counter()
        try:
            servers = self.source.acquire(now)
        except SnapshotError as exc:
            report.duration = time.perf_counter() - started
            report.errors.append(f"scrape: {exc}")
            LOGGER.warning("Scrape failed after %.2fs: %s", report.duration, exc)
            return report
        LOGGER.info(
            "Scrape done in %.2fs, %s servers", time.perf_counter() - started, len(servers)
        )

        meta = make_meta_entry(now, servers)
        self.hub.publish(meta)
        snapshot: List[Entry] = [entry for entry in servers if not entry.is_meta]
        snapshot.append(meta)
        report.servers = len(snapshot) - 1
        report.players = meta.players

        self._step(report, "save servers", self.store.save_entries, snapshot)
        self._step(report, "save history", self.recorder.record, now, snapshot)
        self._reconcile(report, now, snapshot)

        report.ok = not report.errors
        report.duration = time.perf_counter() - started
        return report

    def _reconcile(self, report: CycleReport, now: datetime, snapshot: List[Entry]) -> None:
        try:
            plan = self.reconciler.reconcile(now, snapshot)
        except StoreError as exc:
            report.errors.append(f"update old servers: {exc}")
            LOGGER.error("Error updating old servers: %s", exc)
            return
        if plan.to_evict:
            if self._step(report, "remove servers", self.store.delete_entries, plan.to_evict):
                report.evicted = len(plan.to_evict)
                LOGGER.info(
                    "Evicted %s servers: %s",
                    len(plan.to_evict),
                    ", ".join(entry.title for entry in plan.to_evict),
                )
        if plan.to_zero:
            if self._step(report, "zero servers", self.store.save_entries, plan.to_zero):
                report.zeroed = len(plan.to_zero)
            self._step(report, "zeroed history", self.recorder.record, now, plan.to_zero)

    def _step(self, report: CycleReport, name: str, func, *args) -> bool:
        try:
            func(*args)
        except StoreError as exc:
            report.errors.append(f"{name}: {exc}")
            LOGGER.error("Error during %s: %s", name, exc)
            return False
        return True
