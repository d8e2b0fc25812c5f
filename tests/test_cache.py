"""Tests for the in-memory response cache."""

from jokeapi.stores.cache import ResponseCache


def test_get_returns_value_set(cache: ResponseCache):
    cache.set("/jokes/1", {"id": "1"})
    assert cache.get("/jokes/1") == {"id": "1"}


def test_value_expires_after_ttl(cache: ResponseCache, clock):
    cache.set("/jokes/random", ["a"], ttl=60)

    clock.advance(59.9)
    assert cache.get("/jokes/random") == ["a"]

    clock.advance(0.2)
    assert cache.get("/jokes/random") is None


def test_entry_is_live_exactly_at_expiry(cache: ResponseCache, clock):
    cache.set("k", "v", ttl=10)
    clock.advance(10)
    assert cache.has("k")
    assert cache.get("k") == "v"


def test_default_ttl_applies_when_ttl_omitted(cache: ResponseCache, clock):
    cache.set("k", "v")
    clock.advance(299)
    assert cache.get("k") == "v"
    clock.advance(2)
    assert cache.get("k") is None


def test_zero_ttl_is_not_replaced_by_default(cache: ResponseCache, clock):
    cache.set("k", "v", ttl=0)
    clock.advance(0.001)
    assert cache.get("k") is None


def test_missing_and_deleted_keys_are_absent(cache: ResponseCache):
    assert cache.get("never-set") is None
    assert cache.get("never-set", "fallback") == "fallback"

    cache.set("k", "v")
    cache.delete("k")
    assert cache.get("k") is None

    # deleting an absent key is a no-op
    cache.delete("k")


def test_set_overwrites_and_restarts_ttl(cache: ResponseCache, clock):
    cache.set("k", "old", ttl=10)
    clock.advance(8)
    cache.set("k", "new", ttl=10)
    clock.advance(8)
    assert cache.get("k") == "new"


def test_get_evicts_expired_entry_but_has_does_not(cache: ResponseCache, clock):
    cache.set("a", 1, ttl=1)
    cache.set("b", 2, ttl=1)
    clock.advance(5)

    assert not cache.has("a")
    assert "a" in cache._entries

    assert cache.get("b") is None
    assert "b" not in cache._entries


def test_stats_reports_only_live_entries(cache: ResponseCache, clock):
    cache.set("key1", "value1")
    cache.set("key2", "value2")
    cache.set("short", "value3", ttl=1)
    clock.advance(2)

    stats = cache.stats()

    assert stats.size == 2
    assert sorted(stats.keys) == ["key1", "key2"]


def test_stats_rates(cache: ResponseCache):
    assert cache.stats().hit_rate == 0
    assert cache.stats().miss_rate == 0

    cache.set("k", "v")
    cache.get("k")
    cache.get("missing")
    cache.has("missing")

    stats = cache.stats()
    assert stats.hit_rate == 0.33
    assert stats.miss_rate == 0.67


def test_clear_removes_entries_and_resets_metrics(cache: ResponseCache):
    cache.set("key1", "value1")
    cache.set("key2", "value2")
    cache.get("key1")

    cache.clear()

    stats = cache.stats()
    assert stats.size == 0
    assert stats.hit_rate == 0
    assert cache.get("key1") is None
    assert cache.get("key2") is None


def test_reset_metrics_keeps_entries(cache: ResponseCache):
    cache.set("k", "v")
    cache.get("k")
    cache.reset_metrics()

    stats = cache.stats()
    assert stats.size == 1
    assert stats.hit_rate == 0
    assert stats.miss_rate == 0


def test_invalidate_pattern_removes_matching_keys_only(cache: ResponseCache):
    cache.set("/jokes/random/5", "A")
    cache.set("/jokes/7", "B")
    cache.set("/types", "C")

    removed = cache.invalidate_pattern("/jokes")

    assert removed == 2
    assert cache.get("/jokes/random/5") is None
    assert cache.get("/jokes/7") is None
    assert cache.get("/types") == "C"


def test_cleanup_purges_expired(cache: ResponseCache, clock):
    cache.set("old", 1, ttl=1)
    cache.set("fresh", 2, ttl=100)
    clock.advance(10)

    assert cache.cleanup() == 1
    assert list(cache._entries) == ["fresh"]


def test_touch_extends_live_entries(cache: ResponseCache, clock):
    cache.set("k", "v", ttl=5)
    clock.advance(4)
    assert cache.touch("k", 10)
    clock.advance(9)
    assert cache.get("k") == "v"

    clock.advance(2)
    assert not cache.touch("k", 10)
    assert not cache.touch("missing", 10)


def test_set_many(cache: ResponseCache, clock):
    cache.set_many({"a": 1, "b": 2}, ttl=5)
    assert cache.get("a") == 1
    assert cache.get("b") == 2
    clock.advance(6)
    assert len(cache) == 0


def test_len_and_contains_do_not_touch_metrics(cache: ResponseCache):
    cache.set("k", "v")
    assert "k" in cache
    assert "other" not in cache
    assert len(cache) == 1
    assert cache.stats().hit_rate == 0
    assert cache.stats().miss_rate == 0


def test_set_if_unchanged_stores_when_nothing_was_invalidated(cache: ResponseCache):
    generation = cache.generation
    assert cache.set_if_unchanged("/jokes/1", "fresh", generation) is True
    assert cache.get("/jokes/1") == "fresh"


def test_set_if_unchanged_refuses_after_invalidation(cache: ResponseCache):
    generation = cache.generation
    cache.invalidate_pattern("/jokes")

    assert cache.set_if_unchanged("/jokes/1", "stale", generation) is False
    assert cache.get("/jokes/1") is None


def test_set_if_unchanged_refuses_after_clear(cache: ResponseCache):
    generation = cache.generation
    cache.clear()

    assert cache.set_if_unchanged("/types", ["dad"], generation) is False
    assert "/types" not in cache


def test_generation_moves_even_when_nothing_matched(cache: ResponseCache):
    before = cache.generation
    assert cache.invalidate_pattern("/nothing-here") == 0
    assert cache.generation > before
