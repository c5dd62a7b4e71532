# ============================================================================
# OBSERVABILITY
# ============================================================================
# EPOCH: 1 - HANDLER SUPERVISION
# STATUS: Core - In-process metrics
# PURPOSE: Dispatch counters and timings for handler runs
# CREATED: 19 OCT 2026
# ============================================================================
"""
Observability

In-process metrics for the handler supervisor:
- Counters (dispatches, recursion limit hits)
- Gauges
- Histograms (dispatch duration)

Usage:
    from core.observability import get_metrics, track_metric

    with get_metrics().timer("handler.dispatch_ms", tags={"handler": name}):
        ...
    track_metric("handler.dispatched", tags={"handler": name})
"""

import logging
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 1000


# ============================================================================
# METRICS
# ============================================================================

@dataclass
class MetricPoint:
    """A single metric data point."""
    name: str
    value: float
    timestamp: float = field(default_factory=time.time)
    tags: Dict[str, str] = field(default_factory=dict)
    unit: str = ""


def _metric_key(name: str, tags: Optional[Dict[str, str]]) -> str:
    if not tags:
        return name
    rendered = ",".join(f"{k}={v}" for k, v in sorted(tags.items()))
    return f"{name}:{rendered}"


class MetricsCollector:
    """
    Collects metrics.

    Supports counters, gauges, and histograms. Counter and gauge values are
    exact; only the most recent max_points raw data points are kept.
    """

    def __init__(self, max_points: int = DEFAULT_MAX_POINTS):
        if max_points < 1:
            raise ValueError(f"max_points must be >= 1, got {max_points}")
        self._metrics: Deque[MetricPoint] = deque(maxlen=max_points)
        self._counters: Dict[str, float] = {}
        self._gauges: Dict[str, float] = {}

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Increment a counter metric.

        Args:
            name: Metric name
            value: Value to add (default 1)
            tags: Optional tags
        """
        key = _metric_key(name, tags)
        self._counters[key] = self._counters.get(key, 0) + value

        self._metrics.append(MetricPoint(
            name=name,
            value=value,
            tags=tags or {},
        ))

    def gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Set a gauge metric.

        Args:
            name: Metric name
            value: Current value
            tags: Optional tags
        """
        self._gauges[_metric_key(name, tags)] = value

        self._metrics.append(MetricPoint(
            name=name,
            value=value,
            tags=tags or {},
        ))

    def histogram(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
        unit: str = "ms",
    ) -> None:
        """
        Record a histogram value.

        Args:
            name: Metric name
            value: Value to record
            tags: Optional tags
            unit: Unit of measurement
        """
        self._metrics.append(MetricPoint(
            name=name,
            value=value,
            tags=tags or {},
            unit=unit,
        ))

    @contextmanager
    def timer(self, name: str, tags: Optional[Dict[str, str]] = None):
        """
        Context manager for timing operations.

        Records the duration even when the body raises.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.histogram(name, duration_ms, tags=tags, unit="ms")

    def get_counter(self, name: str, tags: Optional[Dict[str, str]] = None) -> float:
        """Current value of a counter (0 if never incremented)."""
        return self._counters.get(_metric_key(name, tags), 0)

    def get_gauge(self, name: str, tags: Optional[Dict[str, str]] = None) -> Optional[float]:
        return self._gauges.get(_metric_key(name, tags))

    def get_metrics(self) -> List[MetricPoint]:
        """Get the retained data points, oldest first."""
        return list(self._metrics)

    def clear(self) -> None:
        """Clear collected metrics."""
        self._metrics.clear()
        self._counters.clear()
        self._gauges.clear()


# ============================================================================
# GLOBAL INSTANCES
# ============================================================================

_metrics: Optional[MetricsCollector] = None


def initialize(collector: Optional[MetricsCollector] = None) -> MetricsCollector:
    """
    Initialize (or replace) the global metrics collector.

    Args:
        collector: Optional collector to install (a fresh one if omitted)
    """
    global _metrics
    _metrics = collector or MetricsCollector()
    logger.debug("Metrics collector initialized")
    return _metrics


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector."""
    if _metrics is None:
        return initialize()
    return _metrics


def track_metric(
    name: str,
    value: float = 1.0,
    tags: Optional[Dict[str, str]] = None,
) -> None:
    """
    Track a counter metric (convenience function).
    """
    get_metrics().counter(name, value, tags)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_MAX_POINTS",
    "MetricPoint",
    "MetricsCollector",
    "initialize",
    "get_metrics",
    "track_metric",
]
