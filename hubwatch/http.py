"""Shared requests session used by the snapshot sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import SourceConfig

_LOGGER = logging.getLogger("hubwatch.http")
_ALLOWED_METHODS = frozenset({"GET", "HEAD"})


@dataclass(frozen=True)
class HttpSettings:
    """Runtime configuration for HTTP requests."""

    retries: int
    backoff_factor: float
    user_agent: str
    status_forcelist: Iterable[int] = (429, 500, 502, 503, 504)

    @classmethod
    def from_config(cls, config: SourceConfig) -> "HttpSettings":
        return cls(
            retries=config.retries,
            backoff_factor=config.backoff_factor,
            user_agent=config.user_agent,
        )


def _build_retry(settings: HttpSettings) -> Retry:
    return Retry(
        total=max(0, settings.retries),
        connect=max(0, settings.retries),
        read=max(0, settings.retries),
        backoff_factor=max(0.0, settings.backoff_factor),
        status_forcelist=tuple(settings.status_forcelist),
        allowed_methods=_ALLOWED_METHODS,
        raise_on_status=False,
    )


def create_session(settings: HttpSettings) -> Session:
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=_build_retry(settings))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers["User-Agent"] = settings.user_agent
    _LOGGER.debug(
        "HTTP session created: retries=%s backoff=%s",
        settings.retries,
        settings.backoff_factor,
    )
    return session
