"""Point-in-time statistical view over a reservoir's values."""

import math
from collections.abc import Iterable

from metricbeatpy.core.converters import Number


class Snapshot:
    """Sorted, immutable copy of sampled values.

    Quantiles use the ``q * (n + 1)`` rank with linear interpolation
    between the two closest values, clamped to the smallest and largest
    value at the ends.
    """

    def __init__(self, values: Iterable[Number]) -> None:
        self._values: tuple[Number, ...] = tuple(sorted(values))

    @property
    def values(self) -> tuple[Number, ...]:
        return self._values

    @property
    def size(self) -> int:
        return len(self._values)

    def get_value(self, quantile: float) -> float:
        """Return the value at the given quantile.

        Args:
            quantile: A value in [0, 1]

        Raises:
            ValueError: If quantile is out of range or NaN.
        """
        if not 0.0 <= quantile <= 1.0:
            raise ValueError(f"{quantile} is not in [0..1]")

        if not self._values:
            return 0.0

        pos = quantile * (len(self._values) + 1)
        index = int(pos)

        if index < 1:
            return float(self._values[0])
        if index >= len(self._values):
            return float(self._values[-1])

        lower = self._values[index - 1]
        upper = self._values[index]
        return lower + (pos - math.floor(pos)) * (upper - lower)

    @property
    def min(self) -> Number:
        return self._values[0] if self._values else 0

    @property
    def max(self) -> Number:
        return self._values[-1] if self._values else 0

    @property
    def mean(self) -> float:
        if not self._values:
            return 0.0
        return sum(self._values) / len(self._values)

    @property
    def stddev(self) -> float:
        """Population standard deviation, 0.0 below two values."""
        if len(self._values) < 2:
            return 0.0
        mean = self.mean
        variance = sum((v - mean) ** 2 for v in self._values) / len(self._values)
        return math.sqrt(variance)

    @property
    def median(self) -> float:
        return self.get_value(0.5)

    @property
    def p75(self) -> float:
        return self.get_value(0.75)

    @property
    def p95(self) -> float:
        return self.get_value(0.95)

    @property
    def p99(self) -> float:
        return self.get_value(0.99)
