"""Named collection of live metrics."""

import threading
from collections.abc import Callable
from typing import Any, TypeVar

from metricbeatpy.core.metrics import Counter, Gauge, Histogram, Meter, Metric, Timer

MetricFilter = Callable[[str, Metric], bool]

_M = TypeVar("_M", Gauge, Counter, Histogram, Meter, Timer)


class MetricRegistry:
    """Registry mapping metric names to live metric objects.

    Names are unique across all metric kinds. Typed accessors such as
    ``counter()`` return the existing metric or register a new one.

    Example:
        ```python
        registry = MetricRegistry()
        registry.counter("jobs.processed").inc()
        with registry.timer("jobs.duration").time():
            run_job()
        ```
    """

    def __init__(self) -> None:
        self._metrics: dict[str, Metric] = {}
        self._lock = threading.Lock()

    def register(self, name: str, metric: Metric) -> Metric:
        """Register a metric under the given name.

        Raises:
            ValueError: If a metric with that name already exists.
        """
        with self._lock:
            if name in self._metrics:
                raise ValueError(f"A metric named {name} already exists")
            self._metrics[name] = metric
        return metric

    def remove(self, name: str) -> bool:
        """Remove a metric, returning whether it was registered."""
        with self._lock:
            return self._metrics.pop(name, None) is not None

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._metrics)

    def gauge(self, name: str, supplier: Callable[[], Any]) -> Gauge:
        """Register a gauge reading its value from ``supplier``."""
        gauge = Gauge(supplier)
        self.register(name, gauge)
        return gauge

    def counter(self, name: str) -> Counter:
        return self._get_or_add(name, Counter)

    def histogram(self, name: str) -> Histogram:
        return self._get_or_add(name, Histogram)

    def meter(self, name: str) -> Meter:
        return self._get_or_add(name, Meter)

    def timer(self, name: str) -> Timer:
        return self._get_or_add(name, Timer)

    def _get_or_add(self, name: str, kind: type[_M]) -> _M:
        with self._lock:
            existing = self._metrics.get(name)
            if existing is None:
                metric = kind()
                self._metrics[name] = metric
                return metric
        if isinstance(existing, kind):
            return existing
        raise ValueError(f"{name} is already used for a different type of metric")

    def gauges(self, metric_filter: MetricFilter | None = None) -> dict[str, Gauge]:
        return self._of_kind(Gauge, metric_filter)

    def counters(self, metric_filter: MetricFilter | None = None) -> dict[str, Counter]:
        return self._of_kind(Counter, metric_filter)

    def histograms(
        self, metric_filter: MetricFilter | None = None
    ) -> dict[str, Histogram]:
        return self._of_kind(Histogram, metric_filter)

    def meters(self, metric_filter: MetricFilter | None = None) -> dict[str, Meter]:
        return self._of_kind(Meter, metric_filter)

    def timers(self, metric_filter: MetricFilter | None = None) -> dict[str, Timer]:
        return self._of_kind(Timer, metric_filter)

    def _of_kind(
        self, kind: type[_M], metric_filter: MetricFilter | None
    ) -> dict[str, _M]:
        """Return metrics of one kind, sorted by name."""
        with self._lock:
            items = sorted(self._metrics.items())
        return {
            name: metric
            for name, metric in items
            if isinstance(metric, kind)
            and (metric_filter is None or metric_filter(name, metric))
        }
