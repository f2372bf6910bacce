"""Exponentially-weighted moving average rates."""

import math
import threading

from metricbeatpy.core.converters import TimeUnit

TICK_INTERVAL_SECONDS = 5
_SECONDS_PER_MINUTE = 60.0


def _alpha(minutes: int) -> float:
    return 1 - math.exp(-TICK_INTERVAL_SECONDS / _SECONDS_PER_MINUTE / minutes)


class EWMA:
    """Moving average of an event rate, decayed once per tick.

    Events are accumulated with ``update`` and folded into the rate every
    time ``tick`` is called, which the owner must do every
    ``TICK_INTERVAL_SECONDS``. The first tick seeds the rate with the
    instant rate of that interval.

    Args:
        alpha: Smoothing factor applied on each tick.
    """

    def __init__(self, alpha: float) -> None:
        self._alpha = alpha
        self._interval = float(TimeUnit.SECONDS.to_nanos(TICK_INTERVAL_SECONDS))
        self._uncounted = 0
        self._rate = 0.0
        self._initialized = False
        self._lock = threading.Lock()

    @classmethod
    def one_minute(cls) -> "EWMA":
        return cls(_alpha(1))

    @classmethod
    def five_minute(cls) -> "EWMA":
        return cls(_alpha(5))

    @classmethod
    def fifteen_minute(cls) -> "EWMA":
        return cls(_alpha(15))

    def update(self, n: int) -> None:
        with self._lock:
            self._uncounted += n

    def tick(self) -> None:
        with self._lock:
            count = self._uncounted
            self._uncounted = 0
            # Events per nanosecond over the last interval
            instant_rate = count / self._interval
            if self._initialized:
                self._rate += self._alpha * (instant_rate - self._rate)
            else:
                self._rate = instant_rate
                self._initialized = True

    def get_rate(self, unit: TimeUnit = TimeUnit.SECONDS) -> float:
        """Return the rate in events per ``unit``."""
        with self._lock:
            return self._rate * float(unit.value)
