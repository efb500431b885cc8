"""
Prometheus metrics collection for project-quality

Counts records by outcome, corrections by rule, remediation failures and
invariant violations, and times each pipeline run.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# REMEDIATION METRICS
# =======================

records_processed_total = Counter(
    name="remediation_records_processed_total",
    documentation="Total number of raw records processed by the remediation engine",
    labelnames=["status"],  # status: clean, rejected, duplicate
    registry=REGISTRY,
)

corrections_applied_total = Counter(
    name="remediation_corrections_applied_total",
    documentation="Total number of corrections applied, per rule",
    labelnames=["rule_id"],
    registry=REGISTRY,
)

remediation_failures_total = Counter(
    name="remediation_failures_total",
    documentation="Total number of per-record remediation failures",
    labelnames=["rule_id", "error_type"],
    registry=REGISTRY,
)


# =======================
# DATA QUALITY METRICS
# =======================

invariant_violations_total = Counter(
    name="remediation_invariant_violations_total",
    documentation="Total number of invariant violations found in clean datasets",
    labelnames=["kind"],
    registry=REGISTRY,
)

audit_issues_total = Counter(
    name="remediation_audit_issues_total",
    documentation="Total number of issues reported by the detect-only audit",
    labelnames=["issue_type", "severity"],
    registry=REGISTRY,
)

clean_dataset_size = Gauge(
    name="remediation_clean_dataset_size",
    documentation="Number of clean records produced by the last run",
    registry=REGISTRY,
)


# =======================
# RUN METRICS
# =======================

pipeline_runs_total = Counter(
    name="remediation_pipeline_runs_total",
    documentation="Total number of pipeline runs",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

pipeline_duration_seconds = Histogram(
    name="remediation_pipeline_duration_seconds",
    documentation="Time spent in one pipeline run in seconds",
    labelnames=["phase"],  # phase: statistics, remediation, validation
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
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


def write_metrics(path: str) -> None:
    """
    Write the current metrics to a textfile-collector file

    Args:
        path: Destination file (e.g. for node_exporter's textfile collector)
    """
    from prometheus_client import write_to_textfile

    write_to_textfile(path, REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(pipeline_duration_seconds, phase="remediation"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    histogram.labels(**labels).observe(value)


# =======================
# REMEDIATION HELPERS
# =======================

def record_remediation_failure(rule_id: str, error_type: str) -> None:
    """
    Record a per-record remediation failure.

    Args:
        rule_id: Rule (or REQUIRED_FIELD) that could not be satisfied
        error_type: Exception class name
    """
    increment_counter(remediation_failures_total, 1, rule_id=rule_id, error_type=error_type)


def record_cleaning_run(clean_records: int, violations: int, rejected: int) -> None:
    """
    Record the outcome of a full pipeline run.

    Args:
        clean_records: Clean records produced
        violations: Invariant violations found
        rejected: Records quarantined
    """
    clean_dataset_size.set(clean_records)
    status = "success" if violations == 0 and rejected == 0 else "failure"
    increment_counter(pipeline_runs_total, 1, status=status)
