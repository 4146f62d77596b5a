"""
In-process token usage tracking.

Keeps the most recent usage records in a bounded deque; the oldest record is
evicted first once the capacity is reached. Nothing is persisted. Tracking is
a best-effort side channel and never fails the analysis that produced it.
"""

import threading
from collections import deque
from datetime import datetime, timezone
from typing import Optional

import structlog

from email_intelligence.models.llm_models import TokenTotals, UsageRecord


logger = structlog.get_logger(__name__)


class TokenUsageTracker:
    """
    Bounded history of token usage records.

    Thread-safe: all access goes through a lock, so the tracker can be shared
    between the event loop and worker threads.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._records: deque[UsageRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def track(self, record: UsageRecord) -> None:
        """Append a record, evicting the oldest one when full."""
        with self._lock:
            self._records.append(record)
        logger.debug(
            "Token usage tracked",
            vendor=record.vendor,
            model=record.model_id,
            operation=record.operation,
            input_tokens=record.input_tokens,
            output_tokens=record.output_tokens,
        )

    def get_usage(self, since: Optional[datetime] = None) -> list[UsageRecord]:
        """
        Records in insertion order, optionally only those at or after ``since``.

        A naive ``since`` is read as UTC, the zone records are stamped in.
        """
        with self._lock:
            records = list(self._records)
        if since is None:
            return records
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        return [r for r in records if r.timestamp >= since]

    def get_total_tokens(self, since: Optional[datetime] = None) -> TokenTotals:
        """Summed input and output tokens over the retained window."""
        totals = TokenTotals()
        for record in self.get_usage(since):
            totals.input += record.input_tokens
            totals.output += record.output_tokens
        return totals

    def totals_by_operation(self, since: Optional[datetime] = None) -> dict[str, TokenTotals]:
        """Totals grouped by operation name, in order of first appearance."""
        grouped: dict[str, TokenTotals] = {}
        for record in self.get_usage(since):
            totals = grouped.setdefault(record.operation, TokenTotals())
            totals.input += record.input_tokens
            totals.output += record.output_tokens
        return grouped

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
