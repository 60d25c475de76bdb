"""Logging configuration for the hub monitor."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(slots=True)
class LoggerConfig:
    level: int = logging.INFO
    fmt: str = DEFAULT_FORMAT
    # third-party loggers kept at WARNING so polling does not flood the output
    quiet: tuple[str, ...] = ("urllib3", "werkzeug")


def configure_logging(config: LoggerConfig | None = None) -> None:
    config = config or LoggerConfig()
    logging.basicConfig(level=config.level, format=config.fmt, stream=sys.stdout)
    logging.getLogger("hubwatch").setLevel(config.level)
    for name in config.quiet:
        logging.getLogger(name).setLevel(max(config.level, logging.WARNING))
