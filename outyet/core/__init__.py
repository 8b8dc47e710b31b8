"""Core utilities: metrics sink and structured logging helpers."""

from outyet.core.metrics import Metrics, MetricsSink, NullMetrics, get_metrics

__all__ = ["Metrics", "MetricsSink", "NullMetrics", "get_metrics"]
