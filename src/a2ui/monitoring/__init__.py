"""
Performance Monitoring
Prometheus-based metrics collection for the surface runtime
"""

from .metrics import MetricsCollector, metrics_collector

__all__ = [
    "MetricsCollector",
    "metrics_collector",
]
