"""
Metrics Collection
Prometheus metrics for the MDX preview service
"""

import time

from prometheus_client import Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the preview service.
    """

    def __init__(self) -> None:
        # Compile metrics
        self.compiles_total = Counter(
            "folio_compiles_total",
            "Total number of MDX compiles",
            ["status"],
        )
        self.compile_duration = Histogram(
            "folio_compile_duration_seconds",
            "MDX compile duration in seconds",
            ["mode"],
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
        )

        # Preview metrics
        self.stale_results_dropped = Counter(
            "folio_stale_results_dropped_total",
            "Compile results dropped because a newer change was triggered",
        )
        self.preview_sessions = Gauge(
            "folio_preview_sessions",
            "Active live-preview sessions",
        )
        self.stream_messages = Counter(
            "folio_stream_messages_total",
            "Total number of live-preview stream messages",
            ["type"],
        )

        # Cache metrics
        self.cache_hits = Counter(
            "folio_cache_hits_total",
            "Total number of cache hits",
            ["cache_type"],
        )
        self.cache_misses = Counter(
            "folio_cache_misses_total",
            "Total number of cache misses",
            ["cache_type"],
        )

        # Error metrics
        self.errors_total = Counter(
            "folio_errors_total",
            "Total number of errors",
            ["error_type", "component"],
        )

        # System metrics
        self.uptime = Gauge(
            "folio_uptime_seconds",
            "Service uptime in seconds",
        )
        self.start_time = time.time()

    def record_compile(self, status: str, duration: float, mode: str = "preview") -> None:
        """Record a compile outcome."""
        self.compiles_total.labels(status=status).inc()
        self.compile_duration.labels(mode=mode).observe(duration)

    def record_stale_drop(self) -> None:
        """Record a dropped out-of-date result."""
        self.stale_results_dropped.inc()

    def session_opened(self) -> None:
        self.preview_sessions.inc()

    def session_closed(self) -> None:
        self.preview_sessions.dec()

    def record_stream_message(self, msg_type: str) -> None:
        """Record a stream message."""
        self.stream_messages.labels(type=msg_type).inc()

    def record_cache_hit(self, cache_type: str) -> None:
        """Record a cache hit."""
        self.cache_hits.labels(cache_type=cache_type).inc()

    def record_cache_miss(self, cache_type: str) -> None:
        """Record a cache miss."""
        self.cache_misses.labels(cache_type=cache_type).inc()

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
