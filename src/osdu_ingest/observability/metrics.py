"""
Prometheus metrics for osdu-ingest

Counters and histograms for row conversion, batch submission and
partition outcomes. All metrics live in a private registry.
"""
import os
from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# CONVERSION METRICS
# =======================

records_converted_total = Counter(
    name="osdu_records_converted_total",
    documentation="Total number of rows converted into storage records",
    registry=REGISTRY,
)

conversion_failures_total = Counter(
    name="osdu_conversion_failures_total",
    documentation="Total number of rows that failed conversion",
    labelnames=["field_path"],
    registry=REGISTRY,
)

# =======================
# SUBMISSION METRICS
# =======================

batches_submitted_total = Counter(
    name="osdu_batches_submitted_total",
    documentation="Total number of batch submissions",
    labelnames=["strategy", "status"],  # status: success, failure
    registry=REGISTRY,
)

batch_size_records = Histogram(
    name="osdu_batch_size_records",
    documentation="Number of records per submitted batch",
    buckets=[1, 10, 50, 100, 250, 500, 1000, 5000],
    registry=REGISTRY,
)

submission_duration_seconds = Histogram(
    name="osdu_submission_duration_seconds",
    documentation="Time spent submitting one batch in seconds",
    labelnames=["strategy"],
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

# =======================
# PARTITION METRICS
# =======================

partitions_total = Counter(
    name="osdu_partitions_total",
    documentation="Total number of partition writers by terminal outcome",
    labelnames=["outcome"],  # outcome: committed, commit_failed, aborted
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def record_batch_submission(strategy: str, record_count: int, duration_seconds: float, success: bool) -> None:
    """
    Record one batch submission attempt.

    Args:
        strategy: Submission strategy name
        record_count: Records in the batch
        duration_seconds: Time the submission took
        success: Whether the service accepted the batch
    """
    status = "success" if success else "failure"
    batches_submitted_total.labels(strategy=strategy, status=status).inc()
    submission_duration_seconds.labels(strategy=strategy).observe(duration_seconds)
    if success:
        batch_size_records.observe(record_count)
