"""Monitoring for the Email Intelligence Service.

Prometheus metrics for operational alerting plus the in-process token usage
tracker behind the /usage endpoint.
"""

from email_intelligence.monitoring.metrics import (
    batch_items_total,
    cache_lookups_total,
    llm_latency_seconds,
    llm_requests_total,
    llm_tokens_total,
    validation_failures_total,
)
from email_intelligence.monitoring.usage_tracker import TokenUsageTracker

__all__ = [
    "batch_items_total",
    "cache_lookups_total",
    "llm_latency_seconds",
    "llm_requests_total",
    "llm_tokens_total",
    "validation_failures_total",
    "TokenUsageTracker",
]
