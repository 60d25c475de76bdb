"""Configuration helpers for the hub monitor."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

DEFAULT_SOURCE_URL = ""
DEFAULT_USER_AGENT = "hubwatch/0.1"


def _env(key: str, default: str) -> str:
    value = os.getenv(key, default)
    return value.strip() if isinstance(value, str) else default


def _env_int(key: str, default: int) -> int:
    try:
        return int(_env(key, str(default)))
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    try:
        return float(_env(key, str(default)))
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = _env(key, str(default)).lower()
    if value in {"1", "true", "yes", "y"}:
        return True
    if value in {"0", "false", "no", "n"}:
        return False
    return default


@dataclass(slots=True)
class PollerConfig:
    interval: timedelta = timedelta(minutes=15)
    scrape_timeout: timedelta = timedelta(seconds=60)
    retention: timedelta = timedelta(hours=72)
    autostart: bool = True


@dataclass(slots=True)
class SourceConfig:
    url: str = DEFAULT_SOURCE_URL
    retries: int = 0
    backoff_factor: float = 0.5
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(slots=True)
class WebConfig:
    host: str = "0.0.0.0"
    port: int = 8013


@dataclass(slots=True)
class AppConfig:
    base_dir: Path
    database_url: str
    log_level: int = logging.INFO
    poller: PollerConfig = field(default_factory=PollerConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    web: WebConfig = field(default_factory=WebConfig)

    @property
    def db_path(self) -> Path:
        if self.database_url.startswith("sqlite:///"):
            return Path(self.database_url[10:]).expanduser()
        return Path(self.base_dir / "hubwatch.db")


def load_config(base_dir: Path | None = None) -> AppConfig:
    base_dir = base_dir or Path(os.getenv("HUBWATCH_HOME", Path.cwd()))
    data_dir = base_dir / "data"
    data_dir.mkdir(parents=True, exist_ok=True)

    db_path = _env("HUBWATCH_DB_PATH", str(data_dir / "hubwatch.db"))
    poller = PollerConfig(
        interval=timedelta(seconds=_env_int("HUBWATCH_POLL_INTERVAL_SEC", 900)),
        scrape_timeout=timedelta(
            seconds=_env_float("HUBWATCH_SCRAPE_TIMEOUT_SEC", 60.0)
        ),
        retention=timedelta(hours=_env_int("HUBWATCH_RETENTION_HOURS", 72)),
        autostart=_env_bool("HUBWATCH_AUTOSTART", True),
    )
    source = SourceConfig(
        url=_env("HUBWATCH_SOURCE_URL", DEFAULT_SOURCE_URL),
        retries=_env_int("HUBWATCH_HTTP_RETRIES", 0),
        backoff_factor=_env_float("HUBWATCH_HTTP_BACKOFF", 0.5),
        user_agent=_env("HUBWATCH_USER_AGENT", DEFAULT_USER_AGENT),
    )
    web = WebConfig(
        host=_env("HUBWATCH_HOST", "0.0.0.0"),
        port=_env_int("HUBWATCH_PORT", 8013),
    )
    level_name = _env("HUBWATCH_LOG_LEVEL", "INFO").upper()

    return AppConfig(
        base_dir=base_dir,
        database_url=f"sqlite:///{db_path}",
        log_level=getattr(logging, level_name, logging.INFO),
        poller=poller,
        source=source,
        web=web,
    )
