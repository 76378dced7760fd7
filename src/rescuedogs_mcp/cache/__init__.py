"""
Cache module for storing API responses.

Provides an in-memory TTL cache with category lifetimes and filter hashing.
"""

from rescuedogs_mcp.cache.memory import MISSING, CacheEntry, CacheLayer, filter_hash

__all__ = ["CacheLayer", "CacheEntry", "MISSING", "filter_hash"]
