from prometheus_client import Counter, Histogram, REGISTRY


def registered_metric(metric_type, name, documentation, **kwargs):
    """Reuse the collector already registered under ``name`` (module reloads, test runs)."""
    existing = REGISTRY._names_to_collectors.get(name)
    if existing is not None:
        return existing
    return metric_type(name, documentation, registry=REGISTRY, **kwargs)


REQUESTS_TOTAL = registered_metric(
    Counter,
    "todo_requests_total",
    "Total requests",
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = registered_metric(
    Histogram,
    "todo_request_latency_seconds",
    "Request latency",
    labelnames=["endpoint"],
)

TASKS_EXTRACTED_TOTAL = registered_metric(
    Counter, "todo_tasks_extracted_total", "Total tasks extracted from notes"
)

TASKS_MERGED_TOTAL = registered_metric(
    Counter, "todo_tasks_merged_total", "Total candidate tasks folded into near-duplicates"
)

PARTIAL_RESULTS_TOTAL = registered_metric(
    Counter, "todo_partial_results_total", "Analyses cut short by the time budget or cancellation"
)
