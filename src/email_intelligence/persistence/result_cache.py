"""
In-memory TTL cache for analysis results.

A single TTL applies to every entry. Expiry is lazy: there is no sweeper, an
expired entry is removed when a read finds it. The cache is process-local and
never changes result content, only whether a vendor call happens.

Key layout:
    categorize:<messageId>    one categorization per message
    cold:<senderAddress>      one cold verdict per sender
"""

import threading
import time
from dataclasses import dataclass
from email.utils import parseaddr
from typing import Any, Callable, Optional

import structlog

from email_intelligence.monitoring.metrics import cache_lookups_total


logger = structlog.get_logger(__name__)


def categorize_cache_key(message_id: str) -> str:
    """Cache key for the categorization of one message."""
    return f"categorize:{message_id}"


def cold_email_cache_key(sender: str) -> str:
    """
    Cache key for the cold verdict of one sender.

    Display names and case are dropped so "Ann <ANN@x.io>" and "ann@x.io"
    share an entry.
    """
    _, address = parseaddr(sender)
    return f"cold:{(address or sender).strip().lower()}"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    created_at: float


class ResultCache:
    """
    Process-local result cache with a shared TTL.

    Args:
        ttl_seconds: Lifetime of every entry. 0 or less disables the cache.
        clock: Monotonic time source in seconds (injectable for tests)
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: str) -> Optional[Any]:
        """
        Return the cached value, or None when absent or expired.

        An expired entry is evicted by this call.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() - entry.created_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug("Cache entry expired", key=key)
                entry = None

            if entry is None:
                self._misses += 1
            else:
                self._hits += 1

        cache_lookups_total.labels(
            namespace=_namespace(key), result="hit" if entry else "miss"
        ).inc()
        return entry.value if entry else None

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous entry for the key."""
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        logger.info("Result cache cleared", removed=removed)

    def stats(self) -> dict[str, Any]:
        """Entry count and hit/miss counters (entries may include expired ones)."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "ttl_seconds": self.ttl_seconds,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _namespace(key: str) -> str:
    return key.split(":", 1)[0] if ":" in key else "other"
