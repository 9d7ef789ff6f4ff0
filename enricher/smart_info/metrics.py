"""Prometheus metrics for enrichment jobs."""

from prometheus_client import Counter, Histogram

ENRICHMENT_JOBS_QUEUED = Counter(
    "enricher_jobs_queued_total",
    "Per-asset enrichment jobs submitted by backfills",
    ["job_name"],
)

ENRICHMENT_JOBS_SKIPPED = Counter(
    "enricher_jobs_skipped_total",
    "Enrichment workflows that returned early",
    ["job_name", "reason"],
)

ENRICHMENT_RESULTS_SAVED = Counter(
    "enricher_results_saved_total",
    "Smart info fields written",
    ["field"],
)

INFERENCE_DURATION = Histogram(
    "enricher_inference_duration_seconds",
    "Time spent waiting on the inference service",
    ["model_type"],
)
