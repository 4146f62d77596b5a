"""Prometheus metrics for the Email Intelligence Service.

Exposed at /metrics when PROMETHEUS_ENABLED is set. Useful alerts:
- llm_requests_total{outcome!="success"} rising (vendor or schema trouble)
- validation_failures_total rising (model drifting from the output schema)
- cache_lookups_total hit ratio dropping (TTL too short or keys changing)
"""

from prometheus_client import Counter, Histogram

# === LLM Call Metrics ===

llm_requests_total = Counter(
    "llm_requests_total",
    "Structured LLM calls by vendor, model, operation and outcome",
    ["vendor", "model", "operation", "outcome"],
)
"""
Labels:
- operation: categorize, cold_detection, context, ...
- outcome: success, provider_error, schema_error
"""

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Vendor call latency in seconds",
    ["vendor", "model"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Tokens consumed by vendor, model and type",
    ["vendor", "model", "token_type"],
)
"""
Labels:
- token_type: input, output

Used for cost estimation alongside the in-process usage tracker.
"""

# === Validation Metrics ===

validation_failures_total = Counter(
    "validation_failures_total",
    "Structured output validation failures by stage and error type",
    ["stage", "error_type"],
)
"""
Labels:
- stage: stage1 (JSON parse), stage2 (JSON Schema), stage3 (model)
"""

# === Cache Metrics ===

cache_lookups_total = Counter(
    "cache_lookups_total",
    "Result cache lookups by key namespace and result",
    ["namespace", "result"],
)

# === Batch Metrics ===

batch_items_total = Counter(
    "batch_items_total",
    "Batch items processed by outcome",
    ["outcome"],
)
"""
Labels:
- outcome: analyzed, failed
"""
