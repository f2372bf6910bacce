"""Time units and the unit converters applied to exported figures."""

from collections.abc import Callable
from enum import Enum

Number = int | float
Converter = Callable[[Number], Number]


class TimeUnit(Enum):
    """Time unit, valued by its length in nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60_000_000_000
    HOURS = 3_600_000_000_000
    DAYS = 86_400_000_000_000

    def to_nanos(self, amount: Number) -> Number:
        """Convert an amount of this unit to nanoseconds."""
        return amount * self.value


def identity(value: Number) -> Number:
    """Converter that leaves values untouched."""
    return value


def rate_converter(unit: TimeUnit) -> Converter:
    """Create a converter from events/second to events/``unit``.

    Args:
        unit: Time unit rates are reported per (e.g., TimeUnit.MINUTES)

    Returns:
        Callable multiplying a per-second rate by the unit length in seconds.
    """
    factor = unit.value / TimeUnit.SECONDS.value

    def convert(rate: Number) -> float:
        return rate * factor

    return convert


def duration_converter(unit: TimeUnit) -> Converter:
    """Create a converter from nanoseconds to ``unit``.

    Integer durations (min, max) stay integers and are truncated, float
    figures (mean, percentiles) stay floats.

    Args:
        unit: Time unit durations are reported in (e.g., TimeUnit.MILLISECONDS)

    Returns:
        Callable dividing a nanosecond duration by the unit length.
    """
    nanos = unit.value

    def convert(duration: Number) -> Number:
        if isinstance(duration, int):
            return duration // nanos
        return duration / nanos

    return convert
