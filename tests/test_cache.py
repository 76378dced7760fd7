"""
Tests for the in-memory cache layer.
"""

import asyncio

import pytest

from rescuedogs_mcp.cache.memory import MISSING, CacheEntry, CacheLayer, filter_hash
from rescuedogs_mcp.core.exceptions import CacheError


class TestCacheEntry:
    """Tests for CacheEntry expiry."""

    def test_expired_at_boundary(self):
        """Test that an entry is expired exactly at its expiry time."""
        entry = CacheEntry("k", "v", expires_at=100.0)

        assert not entry.is_expired(99.9)
        assert entry.is_expired(100.0)
        assert entry.is_expired(150.0)


class TestCacheLayer:
    """Tests for CacheLayer get/set semantics."""

    def test_set_and_get(self, cache):
        """Test storing and retrieving a value."""
        cache.set("statistics", {"total": 1})

        assert cache.get("statistics") == {"total": 1}

    def test_missing_key(self, cache):
        """Test that an unknown key returns the MISSING sentinel."""
        assert cache.get("nope") is MISSING
        assert not MISSING

    def test_cached_none_is_a_hit(self, cache):
        """Test that a cached None is distinguishable from a miss."""
        cache.set("key", None)

        assert cache.get("key") is None
        assert cache.get("key") is not MISSING

    def test_live_before_ttl(self, cache, clock):
        """Test that an entry is returned until its TTL elapses."""
        cache.set("key", "value", ttl_seconds=60)
        clock.advance(59.9)

        assert cache.get("key") == "value"

    def test_expired_at_ttl(self, cache, clock):
        """Test that an entry is gone once its TTL has elapsed."""
        cache.set("key", "value", ttl_seconds=60)
        clock.advance(60)

        assert cache.get("key") is MISSING
        assert cache.stats()["total_entries"] == 0

    def test_default_ttl(self, clock):
        """Test that entries without a TTL use the default lifetime."""
        cache = CacheLayer(default_ttl=10, clock=clock)
        cache.set("key", "value")

        clock.advance(9)
        assert cache.has("key")
        clock.advance(1)
        assert not cache.has("key")

    def test_overwrite_resets_expiry(self, cache, clock):
        """Test that setting a key again replaces value and expiry."""
        cache.set("key", "old", ttl_seconds=10)
        clock.advance(8)
        cache.set("key", "new", ttl_seconds=10)
        clock.advance(8)

        assert cache.get("key") == "new"

    def test_non_positive_ttl_rejected(self, cache):
        """Test that a zero or negative TTL raises CacheError."""
        with pytest.raises(CacheError):
            cache.set("key", "value", ttl_seconds=0)
        with pytest.raises(CacheError):
            cache.set("key", "value", ttl_seconds=-5)

    def test_delete(self, cache):
        """Test deleting a single entry."""
        cache.set("key", "value")

        assert cache.delete("key") is True
        assert cache.delete("key") is False
        assert cache.get("key") is MISSING

    def test_invalidate_prefix(self, cache):
        """Test invalidating all entries under a prefix."""
        cache.set("filter_counts:a", 1)
        cache.set("filter_counts:b", 2)
        cache.set("statistics", 3)

        assert cache.invalidate("filter_counts:") == 2
        assert cache.get("statistics") == 3

    def test_flush(self, cache):
        """Test that flush empties the cache."""
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.flush() == 2
        assert cache.get("a") is MISSING
        assert cache.get("b") is MISSING

    def test_cleanup_removes_only_expired(self, cache, clock):
        """Test that cleanup drops expired entries and keeps live ones."""
        cache.set("short", 1, ttl_seconds=5)
        cache.set("long", 2, ttl_seconds=500)
        clock.advance(10)

        assert cache.cleanup() == 1
        assert cache.get("long") == 2

    def test_stats(self, cache, clock):
        """Test hit, miss and category counters."""
        cache.set_breed_stats("breeds")
        cache.set_filter_counts("{}", "counts")
        cache.set("temp", 1, ttl_seconds=1)
        clock.advance(2)

        cache.get_breed_stats()
        cache.get_statistics()

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["total_entries"] == 3
        assert stats["valid_entries"] == 2
        assert stats["expired_entries"] == 1
        assert stats["entries_by_category"] == {"breed_stats": 1, "filter_counts": 1}


class TestCategoryAccessors:
    """Tests for the category accessors and their lifetimes."""

    def test_filter_counts_ttl(self, cache, clock):
        """Test that filter counts expire after five minutes."""
        cache.set_filter_counts("{}", "counts")

        clock.advance(299)
        assert cache.get_filter_counts("{}") == "counts"
        clock.advance(1)
        assert cache.get_filter_counts("{}") is MISSING

    def test_image_ttl(self, cache, clock):
        """Test that images live for thirty minutes."""
        cache.set_image("https://x/a.jpg", "thumbnail", "b64")

        clock.advance(1799)
        assert cache.get_image("https://x/a.jpg", "thumbnail") == "b64"
        assert cache.get_image("https://x/a.jpg", "medium") is MISSING
        clock.advance(1)
        assert cache.get_image("https://x/a.jpg", "thumbnail") is MISSING

    def test_organization_variants_are_separate(self, cache):
        """Test that organization listings with a variant use their own key."""
        cache.set_organizations(["active"])
        cache.set_organizations(["page"], "active_only=False:limit=5")

        assert cache.get_organizations() == ["active"]
        assert cache.get_organizations("active_only=False:limit=5") == ["page"]
        assert cache.get_organizations("active_only=True:limit=5") is MISSING

    def test_make_key(self):
        """Test joining key parts."""
        assert CacheLayer.make_key("image", "u", "thumbnail") == "image:u:thumbnail"


class TestFilterHash:
    """Tests for filter_hash."""

    def test_order_independent(self):
        """Test that equal filter sets hash the same regardless of order."""
        first = filter_hash({"size": "Small", "breed": "Mixed"})
        second = filter_hash({"breed": "Mixed", "size": "Small"})

        assert first == second

    def test_ignores_absent_fields(self):
        """Test that None values do not take part in the hash."""
        assert filter_hash({"breed": "Mixed", "sex": None}) == filter_hash({"breed": "Mixed"})

    def test_empty(self):
        """Test the hash of an empty filter context."""
        assert filter_hash({}) == "{}"

    def test_different_values_differ(self):
        """Test that different filter values produce different keys."""
        assert filter_hash({"size": "Small"}) != filter_hash({"size": "Large"})


class TestSweeper:
    """Tests for the periodic sweep task."""

    @pytest.mark.asyncio
    async def test_sweeper_removes_expired(self, clock):
        """Test that the sweeper cleans up without any reads."""
        cache = CacheLayer(sweep_interval=0.01, clock=clock)
        cache.set("key", "value", ttl_seconds=1)
        clock.advance(5)

        cache.start_sweeper()
        try:
            await asyncio.sleep(0.05)
        finally:
            await cache.stop_sweeper()

        assert cache.stats()["total_entries"] == 0

    @pytest.mark.asyncio
    async def test_stop_without_start(self, cache):
        """Test that stopping an idle sweeper is a no-op."""
        await cache.stop_sweeper()
