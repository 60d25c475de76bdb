"""Shared pytest fixtures for hubwatch tests.

Provides an in-memory SQLite database and a SqlStorage on top of it. Plain
test doubles live in ``helpers`` so test modules can import them directly.
"""

from __future__ import annotations

import pytest

from hubwatch.database import Database
from hubwatch.storage import SqlStorage


@pytest.fixture()
def database():
    db = Database("sqlite:///:memory:")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture()
def sql_store(database) -> SqlStorage:
    return SqlStorage(database)
