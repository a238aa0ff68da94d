"""
Metrics Collection
Prometheus metrics for protocol, store and render activity
"""

import time
from contextlib import contextmanager
from typing import Callable

from prometheus_client import Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the surface runtime.
    """

    def __init__(self) -> None:
        # Protocol metrics
        self.messages_total = Counter(
            "a2ui_messages_total",
            "Total number of protocol messages processed",
            ["type", "status"],
        )
        self.protocol_errors = Counter(
            "a2ui_protocol_errors_total",
            "Total number of rejected protocol messages",
            ["kind"],
        )

        # Validation metrics
        self.validation_failures = Counter(
            "a2ui_validation_failures_total",
            "Total number of components that failed validation",
            ["kind"],
        )

        # Store metrics
        self.store_errors = Counter(
            "a2ui_store_errors_total",
            "Total number of rejected store operations",
            ["kind"],
        )
        self.surfaces_live = Gauge(
            "a2ui_surfaces_live",
            "Number of surfaces currently held by the store",
        )
        self.surfaces_evicted = Counter(
            "a2ui_surfaces_evicted_total",
            "Total number of surfaces evicted by the retention policy",
        )

        # Render metrics
        self.render_duration = Histogram(
            "a2ui_render_duration_seconds",
            "Render pass duration in seconds",
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )
        self.fallbacks_total = Counter(
            "a2ui_render_fallbacks_total",
            "Total number of fallback placeholders rendered",
            ["reason"],
        )

        # Event metrics
        self.actions_total = Counter(
            "a2ui_actions_total",
            "Total number of action events",
            ["status"],
        )

        # System metrics
        self.uptime = Gauge(
            "a2ui_uptime_seconds",
            "Runtime uptime in seconds",
        )
        self.start_time = time.time()

    def record_message(self, msg_type: str, status: str) -> None:
        """Record a processed protocol message."""
        self.messages_total.labels(type=msg_type, status=status).inc()

    def record_protocol_error(self, kind: str) -> None:
        self.protocol_errors.labels(kind=kind).inc()

    def record_validation_failure(self, kind: str) -> None:
        self.validation_failures.labels(kind=kind).inc()

    def record_store_error(self, kind: str) -> None:
        self.store_errors.labels(kind=kind).inc()

    def set_live_surfaces(self, count: int) -> None:
        self.surfaces_live.set(count)

    def record_eviction(self) -> None:
        self.surfaces_evicted.inc()

    def record_render(self, duration: float) -> None:
        self.render_duration.observe(duration)

    def record_fallback(self, reason: str) -> None:
        self.fallbacks_total.labels(reason=reason).inc()

    def record_action(self, status: str) -> None:
        """Record an action event (sent, debounced, failed)."""
        self.actions_total.labels(status=status).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]):
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
