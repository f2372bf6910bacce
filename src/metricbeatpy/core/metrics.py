"""Live metric types: gauges, counters, histograms, meters and timers."""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import timedelta
from typing import Any

from metricbeatpy.core.clock import DEFAULT_CLOCK, Clock
from metricbeatpy.core.converters import Number, TimeUnit
from metricbeatpy.core.ewma import EWMA, TICK_INTERVAL_SECONDS
from metricbeatpy.core.reservoirs import Reservoir, UniformReservoir
from metricbeatpy.core.snapshot import Snapshot

_TICK_INTERVAL_NS = TimeUnit.SECONDS.to_nanos(TICK_INTERVAL_SECONDS)


class Gauge:
    """Metric reporting a single instantaneous value.

    The value is read from ``supplier`` each time it is requested, so it
    is always current at export time.

    Example:
        ```python
        queue_depth = Gauge(lambda: len(queue))
        ```
    """

    def __init__(self, supplier: Callable[[], Any]) -> None:
        self._supplier = supplier

    @property
    def value(self) -> Any:
        return self._supplier()


class Counter:
    """Metric holding a cumulative count that can go up or down."""

    def __init__(self) -> None:
        self._count = 0
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    @property
    def count(self) -> int:
        return self._count


class Histogram:
    """Metric tracking the distribution of observed values.

    Args:
        reservoir: Where sampled values are kept (default: UniformReservoir).
    """

    def __init__(self, reservoir: Reservoir | None = None) -> None:
        self._reservoir = reservoir if reservoir is not None else UniformReservoir()
        self._count = 0
        self._lock = threading.Lock()

    def update(self, value: Number) -> None:
        """Record an observed value."""
        with self._lock:
            self._count += 1
        self._reservoir.update(value)

    @property
    def count(self) -> int:
        return self._count

    def snapshot(self) -> Snapshot:
        return self._reservoir.snapshot()


class Meter:
    """Metric tracking the rate of events.

    Rates are exponentially-weighted moving averages over one, five and
    fifteen minutes, plus the mean rate since creation. All rates are in
    events per second.

    Args:
        clock: Time source (default: system clock).
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or DEFAULT_CLOCK
        self._m1 = EWMA.one_minute()
        self._m5 = EWMA.five_minute()
        self._m15 = EWMA.fifteen_minute()
        self._count = 0
        self._start_time = self._clock.tick()
        self._last_tick = self._start_time
        self._lock = threading.Lock()

    def mark(self, n: int = 1) -> None:
        """Record the occurrence of ``n`` events."""
        self._tick_if_necessary()
        with self._lock:
            self._count += n
        self._m1.update(n)
        self._m5.update(n)
        self._m15.update(n)

    def _tick_if_necessary(self) -> None:
        with self._lock:
            new_tick = self._clock.tick()
            age = new_tick - self._last_tick
            if age <= _TICK_INTERVAL_NS:
                return
            self._last_tick = new_tick - age % _TICK_INTERVAL_NS
            required_ticks = age // _TICK_INTERVAL_NS
        for _ in range(required_ticks):
            self._m1.tick()
            self._m5.tick()
            self._m15.tick()

    @property
    def count(self) -> int:
        return self._count

    @property
    def one_minute_rate(self) -> float:
        self._tick_if_necessary()
        return self._m1.get_rate(TimeUnit.SECONDS)

    @property
    def five_minute_rate(self) -> float:
        self._tick_if_necessary()
        return self._m5.get_rate(TimeUnit.SECONDS)

    @property
    def fifteen_minute_rate(self) -> float:
        self._tick_if_necessary()
        return self._m15.get_rate(TimeUnit.SECONDS)

    @property
    def mean_rate(self) -> float:
        count = self._count
        if count == 0:
            return 0.0
        elapsed = self._clock.tick() - self._start_time
        if elapsed <= 0:
            return 0.0
        return count / elapsed * TimeUnit.SECONDS.value


class Timer:
    """Metric combining a histogram of durations with a meter of calls.

    Durations are stored in nanoseconds.

    Args:
        reservoir: Where sampled durations are kept (default: UniformReservoir).
        clock: Time source for rates and ``time()`` (default: system clock).
    """

    def __init__(
        self,
        reservoir: Reservoir | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._clock = clock or DEFAULT_CLOCK
        self._histogram = Histogram(reservoir)
        self._meter = Meter(self._clock)

    def update(
        self,
        duration: Number | timedelta,
        unit: TimeUnit = TimeUnit.NANOSECONDS,
    ) -> None:
        """Record a duration.

        Args:
            duration: Elapsed time, either a number of ``unit`` or a timedelta.
            unit: Unit of a numeric duration (ignored for timedelta).
        """
        if isinstance(duration, timedelta):
            nanos = (duration // timedelta(microseconds=1)) * 1_000
        else:
            nanos = int(unit.to_nanos(duration))
        if nanos < 0:
            return
        self._histogram.update(nanos)
        self._meter.mark()

    @contextmanager
    def time(self) -> Iterator[None]:
        """Context manager recording the duration of its block."""
        start = self._clock.tick()
        try:
            yield
        finally:
            self.update(self._clock.tick() - start)

    def time_callable(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call ``func`` and record how long it took."""
        with self.time():
            return func(*args, **kwargs)

    @property
    def count(self) -> int:
        return self._histogram.count

    def snapshot(self) -> Snapshot:
        return self._histogram.snapshot()

    @property
    def one_minute_rate(self) -> float:
        return self._meter.one_minute_rate

    @property
    def five_minute_rate(self) -> float:
        return self._meter.five_minute_rate

    @property
    def fifteen_minute_rate(self) -> float:
        return self._meter.fifteen_minute_rate

    @property
    def mean_rate(self) -> float:
        return self._meter.mean_rate


Metric = Gauge | Counter | Histogram | Meter | Timer
