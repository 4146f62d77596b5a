"""
In-process result persistence.

- result_cache.py: TTL cache for categorization and cold detection results

Storage Strategy:
- One TTL for every entry (CACHE_TTL_SECONDS, default 1h; 0 disables)
- Expired entries are evicted lazily on read
- Categorizations keyed per message, cold verdicts per sender address
"""

from email_intelligence.persistence.result_cache import (
    CacheEntry,
    ResultCache,
    categorize_cache_key,
    cold_email_cache_key,
)

__all__ = [
    "CacheEntry",
    "ResultCache",
    "categorize_cache_key",
    "cold_email_cache_key",
]
