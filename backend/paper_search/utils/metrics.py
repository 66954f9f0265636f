"""Prometheus metrics for search, import and indexing."""

from prometheus_client import Counter, Histogram

# Search metrics
search_requests_total = Counter(
    "search_requests_total",
    "Total search requests",
    ["outcome"],
)

search_latency_ms = Histogram(
    "search_latency_ms",
    "Search latency in milliseconds",
    ["outcome"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000],
)

# Import metrics
import_records_total = Counter(
    "import_records_total",
    "Total imported records",
    ["outcome"],
)

# Index metrics
index_documents_total = Counter(
    "index_documents_total",
    "Total documents written to the search index",
    ["operation"],
)


class PrometheusSearchMetrics:
    """Prometheus-based search metrics implementation."""

    def record_search(self, outcome: str, latency_ms: float) -> None:
        """Record one search request."""
        search_requests_total.labels(outcome=outcome).inc()
        search_latency_ms.labels(outcome=outcome).observe(latency_ms)

    def inc_import(self, outcome: str) -> None:
        """Increment imported record counter (created, updated, rejected)."""
        import_records_total.labels(outcome=outcome).inc()

    def inc_indexed(self, operation: str, count: int = 1) -> None:
        """Increment indexed document counter (single, bulk)."""
        index_documents_total.labels(operation=operation).inc(count)


metrics = PrometheusSearchMetrics()
