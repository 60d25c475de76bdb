import hashlib

from helpers import NOW, make_entry
from hubwatch.entries import META_TITLE, Entry
from hubwatch.utils import make_id


def test_make_id_is_deterministic():
    assert make_id("Goonstation") == make_id("Goonstation")
    expected = hashlib.sha256("Goonstation".encode("utf-8")).hexdigest()[:16]
    assert make_id("Goonstation") == expected


def test_make_id_distinguishes_a_realistic_population():
    titles = [f"Space Station 13 server #{n}" for n in range(500)]
    assert len({make_id(title) for title in titles}) == len(titles)


def test_observed_entry_derives_id_and_clamps_players():
    entry = Entry.observed(title="Paradise", last_seen=NOW, players=-3)
    assert entry.id == make_id("Paradise")
    assert entry.players == 0


def test_zeroed_keeps_identity_and_last_seen():
    entry = make_entry("Paradise", 12, NOW, site_url="http://p", game_url="byond://p")
    zeroed = entry.zeroed()
    assert zeroed.players == 0
    assert (zeroed.id, zeroed.title, zeroed.last_seen) == (entry.id, entry.title, entry.last_seen)
    assert zeroed.site_url == "http://p"
    assert entry.players == 12


def test_is_meta_only_for_sentinel_title():
    assert make_entry(META_TITLE, 0, NOW).is_meta
    assert not make_entry("Paradise", 0, NOW).is_meta


def test_to_dict_serializes_timestamp():
    data = make_entry("Paradise", 4, NOW).to_dict()
    assert data["last_seen"] == "2024-03-06T12:00:00Z"
    assert data["players"] == 4

