from datetime import timedelta

import pytest

from helpers import NOW, make_entry
from hubwatch.database import Base
from hubwatch.entries import HistoryPoint
from hubwatch.storage import MemoryStorage, StoreError


def test_sql_store_round_trips_entries(sql_store):
    a = make_entry("A", 3, NOW, site_url="http://a", game_url="byond://a")
    b = make_entry("B", 0, NOW - timedelta(hours=2))
    sql_store.save_entries([a, b])

    assert sql_store.load_entries() == [a, b]
    assert sql_store.get_entry(a.id) == a
    assert sql_store.get_entry("missing") is None


def test_sql_store_save_updates_existing_rows(sql_store):
    a = make_entry("A", 3, NOW - timedelta(hours=1))
    sql_store.save_entries([a])
    sql_store.save_entries([a.zeroed()])
    (stored,) = sql_store.load_entries()
    assert stored.players == 0
    assert stored.last_seen == NOW - timedelta(hours=1)


def test_sql_store_delete_keeps_history(sql_store):
    a = make_entry("A", 3, NOW)
    sql_store.save_entries([a])
    sql_store.append_history([HistoryPoint(NOW, a.id, 3)])
    sql_store.delete_entries([a])

    assert sql_store.load_entries() == []
    assert sql_store.history(a.id, since=NOW - timedelta(hours=1)) == [HistoryPoint(NOW, a.id, 3)]


def test_sql_store_ignores_duplicate_points(sql_store):
    point = HistoryPoint(NOW, "abc", 4)
    sql_store.append_history([point, point])
    sql_store.append_history([point])
    assert sql_store.history("abc", since=NOW - timedelta(minutes=1)) == [point]


def test_sql_store_history_window_is_ordered_and_bounded(sql_store):
    points = [HistoryPoint(NOW - timedelta(hours=h), "abc", h) for h in (30, 2, 1, 0)]
    sql_store.append_history(points)
    window = sql_store.history("abc", since=NOW - timedelta(hours=24), until=NOW - timedelta(minutes=30))
    assert [p.players for p in window] == [2, 1]


def test_sql_store_wraps_database_errors(database, sql_store):
    Base.metadata.drop_all(database.engine)
    with pytest.raises(StoreError):
        sql_store.load_entries()
    with pytest.raises(StoreError):
        sql_store.append_history([HistoryPoint(NOW, "abc", 1)])


def test_memory_store_matches_sql_semantics():
    store = MemoryStorage()
    a = make_entry("A", 1, NOW)
    store.save_entries([a])
    store.append_history([HistoryPoint(NOW, a.id, 1), HistoryPoint(NOW, a.id, 1)])
    store.delete_entries([a])
    assert store.load_entries() == []
    assert store.history(a.id, since=NOW) == [HistoryPoint(NOW, a.id, 1)]
