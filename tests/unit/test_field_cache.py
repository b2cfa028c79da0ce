"""Unit tests for the TTL field cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from specfields.application import FieldCache

if TYPE_CHECKING:
    from tests.conftest import FakeClock


class TestFieldCache:
    """Tests for FieldCache get/set and expiry."""

    def test_get_returns_stored_value(self, cache: FieldCache) -> None:
        cache.set("field_configs", [1, 2, 3])

        assert cache.get("field_configs") == [1, 2, 3]

    def test_missing_key_returns_none(self, cache: FieldCache) -> None:
        assert cache.get("nope") is None

    def test_entry_expires_after_default_ttl(
        self, cache: FieldCache, clock: FakeClock
    ) -> None:
        """Entries older than the TTL are treated as absent and dropped."""
        cache.set("key", "value")
        clock.advance(300)
        assert cache.get("key") == "value"

        clock.advance(1)
        assert cache.get("key") is None
        assert "key" not in cache

    def test_per_entry_ttl_overrides_default(
        self, cache: FieldCache, clock: FakeClock
    ) -> None:
        cache.set("short", "value", ttl=10)
        clock.advance(11)

        assert cache.get("short") is None

    def test_stale_entries_count_toward_size_until_read(
        self, cache: FieldCache, clock: FakeClock
    ) -> None:
        cache.set("key", "value")
        clock.advance(1000)

        assert len(cache) == 1
        cache.get("key")
        assert len(cache) == 0

    def test_falsy_values_are_cached(self, cache: FieldCache) -> None:
        cache.set("empty", [])

        assert cache.get("empty") == []
        assert cache.get_stats().hit_count == 1

    def test_delete(self, cache: FieldCache) -> None:
        cache.set("key", "value")

        assert cache.delete("key") is True
        assert cache.delete("key") is False
        assert cache.get("key") is None


class TestFieldCacheInvalidation:
    """Tests for prefix invalidation and clearing."""

    def test_invalidate_prefix_removes_matching_keys(self, cache: FieldCache) -> None:
        cache.set("field_configs_category_a", 1)
        cache.set("field_configs_category_b", 2)
        cache.set("category_mappings", 3)

        removed = cache.invalidate_prefix("field_configs_category_")

        assert removed == 2
        assert cache.keys() == ["category_mappings"]

    def test_clear_resets_entries_and_stats(self, cache: FieldCache) -> None:
        cache.set("key", "value")
        cache.get("key")
        cache.get("other")

        cache.clear()

        stats = cache.get_stats()
        assert len(cache) == 0
        assert stats.hit_count == 0
        assert stats.miss_count == 0
        assert stats.hit_rate == 0.0


class TestCacheStats:
    """Tests for hit/miss statistics."""

    def test_hit_rate(self, cache: FieldCache) -> None:
        cache.set("key", "value")
        cache.get("key")
        cache.get("key")
        cache.get("key")
        cache.get("missing")

        stats = cache.get_stats()
        assert stats.hit_count == 3
        assert stats.miss_count == 1
        assert stats.hit_rate == 0.75
        assert stats.cache_size == 1

    def test_hit_rate_without_lookups_is_zero(self) -> None:
        assert FieldCache().get_stats().hit_rate == 0.0

    def test_expired_lookup_counts_as_miss(
        self, cache: FieldCache, clock: FakeClock
    ) -> None:
        cache.set("key", "value")
        clock.advance(301)
        cache.get("key")

        assert cache.get_stats().miss_count == 1
