"""Bootstrap helpers that assemble all runtime components."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import AppConfig, load_config
from .database import Database
from .http import HttpSettings, create_session
from .logging_setup import LoggerConfig, configure_logging
from .services.aggregator import MetaEntryHolder
from .services.scheduler import PollScheduler
from .services.stats import StatsService
from .sources import FeedSource, SnapshotSource
from .storage import SqlStorage


class BootstrapContext:
    def __init__(
        self,
        config: AppConfig,
        database: Database,
        store: SqlStorage,
        hub: MetaEntryHolder,
        scheduler: PollScheduler,
        stats: StatsService,
    ) -> None:
        self.config = config
        self.database = database
        self.store = store
        self.hub = hub
        self.scheduler = scheduler
        self.stats = stats

    def shutdown(self) -> None:
        self.scheduler.stop()
        self.database.dispose()


def build_source(config: AppConfig) -> FeedSource:
    session = create_session(HttpSettings.from_config(config.source))
    return FeedSource(config.source.url, config.poller.scrape_timeout, session)


def bootstrap(
    base_dir: Path | None = None,
    config: AppConfig | None = None,
    source: SnapshotSource | None = None,
    start_poller: bool | None = None,
) -> BootstrapContext:
    config = config or load_config(base_dir)
    configure_logging(LoggerConfig(level=config.log_level))
    logging.getLogger("hubwatch.bootstrap").info(
        "Polling %s every %s, retention %s",
        config.source.url or "<no source>",
        config.poller.interval,
        config.poller.retention,
    )

    database = Database(config.database_url)
    database.create_all()
    store = SqlStorage(database)
    hub = MetaEntryHolder()
    scheduler = PollScheduler(
        source=source or build_source(config),
        store=store,
        interval=config.poller.interval,
        retention=config.poller.retention,
        hub=hub,
    )
    if config.poller.autostart if start_poller is None else start_poller:
        scheduler.start()
    return BootstrapContext(config, database, store, hub, scheduler, StatsService(store))
