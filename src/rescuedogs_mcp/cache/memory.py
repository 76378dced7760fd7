"""
In-memory cache implementation.

Provides a process-wide TTL cache for API responses with category-specific
default lifetimes, lazy expiry on read, and a periodic sweep task.

Values are stored by reference. Callers must not mutate objects returned by
``get``; build a modified copy instead.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from rescuedogs_mcp.core.exceptions import CacheError

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel type for a key that is absent or expired."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the monotonic time at which it expires."""

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


def filter_hash(criteria: Mapping[str, Any]) -> str:
    """Derive a deterministic cache key suffix from filter criteria.

    Only fields that are present (not None) take part. Keys are sorted before
    serializing so that equal filter sets hash identically regardless of the
    order in which they were set.

    Args:
        criteria: Mapping of filter name to value.

    Returns:
        Canonical JSON string of the sorted, present filters.
    """
    present = {key: criteria[key] for key in sorted(criteria) if criteria[key] is not None}
    return json.dumps(present, separators=(",", ":"), sort_keys=True)


class CacheLayer:
    """In-memory TTL cache for API responses.

    One instance is created at startup and passed to the components that
    need it. Every operation is a single dict operation, so under asyncio no
    locking is required. Two tasks missing the same key concurrently will
    both fetch and both write; the later write wins.
    """

    DEFAULT_TTL = 600  # 10 minutes
    SWEEP_INTERVAL = 120  # 2 minutes

    # Category lifetimes in seconds
    BREED_STATS_TTL = 600
    STATISTICS_TTL = 600
    ORGANIZATIONS_TTL = 600
    FILTER_COUNTS_TTL = 300
    IMAGE_TTL = 1800

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        sweep_interval: float = SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache layer.

        Args:
            default_ttl: Lifetime in seconds for entries set without a TTL.
            sweep_interval: Seconds between proactive sweeps of expired entries.
            clock: Monotonic time source, injectable for tests.
        """
        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._sweeper: asyncio.Task | None = None

    def get(self, key: str) -> Any:
        """Get a cached value if present and not expired.

        Args:
            key: Cache key.

        Returns:
            The cached value (which may itself be None), or ``MISSING``.
        """
        entry = self._store.get(key)
        if entry is None:
            self._misses += 1
            return MISSING

        if entry.is_expired(self._clock()):
            # Only drop the entry we looked at; a newer set may have replaced it
            if self._store.get(key) is entry:
                del self._store[key]
            self._misses += 1
            return MISSING

        self._hits += 1
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store a value, overwriting any previous value at that key.

        Args:
            key: Cache key.
            value: Value to cache. Stored by reference.
            ttl_seconds: Lifetime in seconds. Uses the default if not specified.
        """
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl
        if ttl_seconds <= 0:
            raise CacheError("set", f"TTL must be positive, got {ttl_seconds}")

        self._store[key] = CacheEntry(key, value, self._clock() + ttl_seconds)

    def has(self, key: str) -> bool:
        """Return True if the key holds a live value."""
        entry = self._store.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def delete(self, key: str) -> bool:
        """Delete a specific cache entry.

        Returns:
            True if an entry was deleted, False if not found.
        """
        return self._store.pop(key, None) is not None

    def invalidate(self, prefix: str) -> int:
        """Invalidate all entries whose key starts with ``prefix``.

        Returns:
            Number of entries deleted.
        """
        doomed = [key for key in self._store if key.startswith(prefix)]
        for key in doomed:
            del self._store[key]
        return len(doomed)

    def cleanup(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def flush(self) -> int:
        """Clear all cache entries.

        The store is swapped out in one step, so no partially flushed state
        is ever observable.

        Returns:
            Number of entries removed.
        """
        old, self._store = self._store, {}
        return len(old)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with entry counts, hit/miss counters, and entries by category.
        """
        now = self._clock()
        valid = 0
        by_category: dict[str, int] = {}
        for key, entry in self._store.items():
            if entry.is_expired(now):
                continue
            valid += 1
            category = key.split(":", 1)[0]
            by_category[category] = by_category.get(category, 0) + 1

        return {
            "total_entries": len(self._store),
            "valid_entries": valid,
            "expired_entries": len(self._store) - valid,
            "hits": self._hits,
            "misses": self._misses,
            "entries_by_category": by_category,
        }

    # Periodic sweep

    def start_sweeper(self) -> None:
        """Start the background sweep task on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop_sweeper(self) -> None:
        """Cancel the background sweep task, if running."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = self.cleanup()
            if removed:
                logger.debug("Cache sweep removed %d expired entries", removed)

    # Category accessors with built-in lifetimes

    def get_breed_stats(self) -> Any:
        return self.get("breed_stats")

    def set_breed_stats(self, stats: Any) -> None:
        self.set("breed_stats", stats, self.BREED_STATS_TTL)

    def get_statistics(self) -> Any:
        return self.get("statistics")

    def set_statistics(self, stats: Any) -> None:
        self.set("statistics", stats, self.STATISTICS_TTL)

    def get_organizations(self, variant: str | None = None) -> Any:
        return self.get(self.make_key("organizations", variant) if variant else "organizations")

    def set_organizations(self, orgs: Any, variant: str | None = None) -> None:
        key = self.make_key("organizations", variant) if variant else "organizations"
        self.set(key, orgs, self.ORGANIZATIONS_TTL)

    def get_filter_counts(self, filter_key: str) -> Any:
        return self.get(self.make_key("filter_counts", filter_key))

    def set_filter_counts(self, filter_key: str, counts: Any) -> None:
        self.set(self.make_key("filter_counts", filter_key), counts, self.FILTER_COUNTS_TTL)

    def get_image(self, url: str, preset: str) -> Any:
        return self.get(self.make_key("image", url, preset))

    def set_image(self, url: str, preset: str, data: Any) -> None:
        self.set(self.make_key("image", url, preset), data, self.IMAGE_TTL)

    @staticmethod
    def make_key(*parts: str) -> str:
        """Create a cache key from multiple parts.

        Args:
            *parts: Key components to join.

        Returns:
            Colon-separated cache key.
        """
        return ":".join(str(p) for p in parts)
