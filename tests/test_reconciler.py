from datetime import timedelta

import pytest

from helpers import NOW, RecordingStore, make_entry
from hubwatch.services.reconciler import Reconciler, classify
from hubwatch.storage import StoreError


def test_entries_past_retention_are_evicted_not_zeroed():
    old = make_entry("Old", 3, NOW - timedelta(hours=80))
    plan = classify(NOW, [old])
    assert plan.to_evict == [old]
    assert plan.to_zero == []


def test_entry_exactly_at_retention_is_zeroed():
    edge = make_entry("Edge", 3, NOW - timedelta(hours=72))
    plan = classify(NOW, [edge])
    assert plan.to_evict == []
    assert [entry.id for entry in plan.to_zero] == [edge.id]


def test_unobserved_entry_is_zeroed_with_identity_preserved():
    gone = make_entry("Gone", 9, NOW - timedelta(hours=1), site_url="http://g")
    plan = classify(NOW, [gone])
    (zeroed,) = plan.to_zero
    assert zeroed.players == 0
    assert zeroed.id == gone.id
    assert zeroed.title == "Gone"
    assert zeroed.site_url == "http://g"
    # last_seen still refers to the last real observation
    assert zeroed.last_seen == gone.last_seen


def test_refreshed_entries_are_untouched():
    fresh = make_entry("Fresh", 4, NOW)
    assert classify(NOW, [fresh]).empty


def test_entries_in_current_snapshot_are_not_zeroed():
    stale_row = make_entry("Live", 4, NOW - timedelta(minutes=15))
    plan = classify(NOW, [stale_row], observed_ids=[stale_row.id])
    assert plan.empty


def test_retention_is_a_parameter():
    entry = make_entry("Short", 1, NOW - timedelta(hours=2))
    assert classify(NOW, [entry], retention=timedelta(hours=1)).to_evict == [entry]
    assert classify(NOW, [entry], retention=timedelta(hours=3)).to_evict == []


def test_classification_is_exclusive_per_entry():
    stored = [
        make_entry("A", 1, NOW),
        make_entry("B", 2, NOW - timedelta(hours=5)),
        make_entry("C", 3, NOW - timedelta(hours=100)),
    ]
    plan = classify(NOW, stored)
    evicted = {entry.id for entry in plan.to_evict}
    zeroed = {entry.id for entry in plan.to_zero}
    assert evicted.isdisjoint(zeroed)
    assert [entry.title for entry in plan.to_evict] == ["C"]
    assert [entry.title for entry in plan.to_zero] == ["B"]


def test_reconciler_loads_stored_state():
    store = RecordingStore()
    store.save_entries(
        [make_entry("A", 1, NOW), make_entry("B", 2, NOW - timedelta(hours=90))]
    )
    plan = Reconciler(store).reconcile(NOW, [make_entry("A", 1, NOW)])
    assert [entry.title for entry in plan.to_evict] == ["B"]
    assert plan.to_zero == []


def test_reconciler_propagates_load_failure():
    store = RecordingStore(fail={"load_entries"})
    with pytest.raises(StoreError):
        Reconciler(store).reconcile(NOW)
