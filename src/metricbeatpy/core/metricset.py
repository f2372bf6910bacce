"""Metric document built once per export cycle."""

from collections.abc import Sequence
from typing import Any

from metricbeatpy.core.converters import Converter, identity
from metricbeatpy.core.exceptions import NameCollisionError
from metricbeatpy.core.metrics import Counter, Gauge, Histogram, Meter, Metric, Timer
from metricbeatpy.core.names import normalize_name, split_name
from metricbeatpy.core.stats import rate_statistics, sample_statistics


class MetricSet:
    """Nested mapping of metric figures, keyed by normalized name segments.

    Each metric name is split on dots into a path; figures are stored in
    the mapping at the end of that path (``jvm.memory.used`` becomes
    ``fields["jvm"]["memory"]["used"] == {"value": ...}``). A path can
    hold either a metric's figures or further nesting, never both.

    Args:
        timestamp: Epoch milliseconds of the export cycle.
        hostname: Host the metrics were collected on.
    """

    def __init__(self, timestamp: int, hostname: str) -> None:
        self._timestamp = timestamp
        self._hostname = hostname
        self._fields: dict[str, Any] = {}
        # Paths holding a metric's figures, never descended into
        self._claimed: set[tuple[str, ...]] = set()

    @property
    def timestamp(self) -> int:
        return self._timestamp

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def fields(self) -> dict[str, Any]:
        return self._fields

    def resolve(self, path: str | Sequence[str]) -> dict[str, Any]:
        """Return the mapping at ``path``, creating missing levels.

        Args:
            path: Dotted metric name or sequence of raw segments.

        Raises:
            NameCollisionError: If a segment holds a value, or an
                intermediate mapping already holds a metric's figures
                (including a gauge whose value is itself a mapping).
            ValueError: If the path has no segments.
        """
        if isinstance(path, str):
            segments = split_name(path)
        else:
            segments = [s for s in map(normalize_name, path) if s]
        if not segments:
            raise ValueError(f"Metric name {path!r} has no path segments")

        full_path = ".".join(segments)
        current = self._fields
        last = len(segments) - 1
        for i, segment in enumerate(segments):
            if segment not in current:
                current[segment] = {}
            node = current[segment]
            if not isinstance(node, dict):
                raise NameCollisionError(segment, full_path)
            elif i < last and (
                _holds_values(node) or tuple(segments[: i + 1]) in self._claimed
            ):
                raise NameCollisionError(segment, full_path)
            current = node
        return current

    def _claim(self, name: str) -> dict[str, Any]:
        """Resolve a fresh mapping for one metric's figures."""
        segments = split_name(name)
        metric = self.resolve(segments)
        # Already populated: another metric normalizes to the same path
        if metric:
            raise NameCollisionError(segments[-1], ".".join(segments))
        self._claimed.add(tuple(segments))
        return metric

    def add_gauge(self, name: str, gauge: Gauge) -> None:
        self._claim(name)["value"] = gauge.value

    def add_counter(self, name: str, counter: Counter) -> None:
        self._claim(name)["count"] = counter.count

    def add_histogram(self, name: str, histogram: Histogram) -> None:
        metric = self._claim(name)
        stats = sample_statistics(histogram, identity)
        metric["count"] = stats.count
        metric.update(stats.sample_fields())

    def add_meter(
        self, name: str, meter: Meter, rate_converter: Converter = identity
    ) -> None:
        self._claim(name).update(rate_statistics(meter, rate_converter).fields())

    def add_timer(
        self,
        name: str,
        timer: Timer,
        duration_converter: Converter = identity,
        rate_converter: Converter = identity,
    ) -> None:
        metric = self._claim(name)
        metric.update(sample_statistics(timer, duration_converter).sample_fields())
        metric.update(rate_statistics(timer, rate_converter).fields())

    def add(
        self,
        name: str,
        metric: Metric,
        duration_converter: Converter = identity,
        rate_converter: Converter = identity,
    ) -> None:
        """Add any kind of metric, dispatching on its type."""
        if isinstance(metric, Gauge):
            self.add_gauge(name, metric)
        elif isinstance(metric, Counter):
            self.add_counter(name, metric)
        elif isinstance(metric, Histogram):
            self.add_histogram(name, metric)
        elif isinstance(metric, Meter):
            self.add_meter(name, metric, rate_converter)
        elif isinstance(metric, Timer):
            self.add_timer(name, metric, duration_converter, rate_converter)
        else:
            raise TypeError(f"Unsupported metric type: {type(metric).__name__}")


def _holds_values(node: dict[str, Any]) -> bool:
    return any(not isinstance(child, dict) for child in node.values())
