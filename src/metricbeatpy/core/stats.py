"""Statistics extracted from histograms, meters and timers at export time."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from metricbeatpy.core.converters import Converter, Number, identity
from metricbeatpy.core.snapshot import Snapshot


@runtime_checkable
class Sampling(Protocol):
    """Anything with a count and a distribution of values."""

    @property
    def count(self) -> int: ...

    def snapshot(self) -> Snapshot: ...


@runtime_checkable
class Metered(Protocol):
    """Anything with a count and moving-average event rates."""

    @property
    def count(self) -> int: ...

    @property
    def one_minute_rate(self) -> float: ...

    @property
    def five_minute_rate(self) -> float: ...

    @property
    def fifteen_minute_rate(self) -> float: ...

    @property
    def mean_rate(self) -> float: ...


@dataclass(frozen=True)
class StatisticalSnapshot:
    """Distribution figures of one histogram or timer.

    Attributes:
        count: Number of values ever recorded.
        min: Smallest sampled value.
        max: Largest sampled value.
        mean: Arithmetic mean of the sample.
        stddev: Population standard deviation of the sample.
        median: 50th percentile.
        p75: 75th percentile.
        p95: 95th percentile.
        p99: 99th percentile.
    """

    count: int
    min: Number
    max: Number
    mean: Number
    stddev: Number
    median: Number
    p75: Number
    p95: Number
    p99: Number

    def sample_fields(self) -> dict[str, Number]:
        """Document fields for the sampled figures, count excluded."""
        return {
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "stddev": self.stddev,
            "median": self.median,
            "percentile75": self.p75,
            "percentile95": self.p95,
            "percentile99": self.p99,
        }


@dataclass(frozen=True)
class RateSnapshot:
    """Event count and rates of one meter or timer."""

    count: int
    rate1m: float
    rate5m: float
    rate15m: float
    ratemean: float

    def fields(self) -> dict[str, Number]:
        return {
            "count": self.count,
            "rate1m": self.rate1m,
            "rate5m": self.rate5m,
            "rate15m": self.rate15m,
            "ratemean": self.ratemean,
        }


def sample_statistics(
    sampling: Sampling,
    duration_converter: Converter = identity,
) -> StatisticalSnapshot:
    """Compute distribution figures from a single snapshot.

    The converter is applied to every figure independently; histograms
    pass ``identity`` since their values carry no time unit.

    Args:
        sampling: Histogram or timer to read
        duration_converter: Unit conversion for each figure

    Returns:
        StatisticalSnapshot with all figures taken from the same snapshot
    """
    snapshot = sampling.snapshot()
    convert = duration_converter
    return StatisticalSnapshot(
        count=sampling.count,
        min=convert(snapshot.min),
        max=convert(snapshot.max),
        mean=convert(snapshot.mean),
        stddev=convert(snapshot.stddev),
        median=convert(snapshot.median),
        p75=convert(snapshot.p75),
        p95=convert(snapshot.p95),
        p99=convert(snapshot.p99),
    )


def rate_statistics(
    metered: Metered,
    rate_converter: Converter = identity,
) -> RateSnapshot:
    """Read the count and the four rates, converting each rate."""
    return RateSnapshot(
        count=metered.count,
        rate1m=rate_converter(metered.one_minute_rate),
        rate5m=rate_converter(metered.five_minute_rate),
        rate15m=rate_converter(metered.fifteen_minute_rate),
        ratemean=rate_converter(metered.mean_rate),
    )
