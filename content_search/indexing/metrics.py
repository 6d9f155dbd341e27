"""Prometheus counters for indexed change events (served at /metrics by the API)."""

from prometheus_client import Counter

EVENTS_PROCESSED = Counter(
    "content_index_events_total",
    "Change events by content type and outcome (succeeded, failed, skipped)",
    ["content_type", "outcome"],
)


def record_outcome(content_type: str | None, outcome: str) -> None:
    EVENTS_PROCESSED.labels(content_type=content_type or "unknown", outcome=outcome).inc()
