"""Sample reservoirs backing histograms and timers.

A reservoir keeps a bounded sample of the values recorded by a histogram
so that snapshots stay cheap regardless of how many values were seen.
"""

import random
import threading
from collections import deque
from typing import Protocol, runtime_checkable

from metricbeatpy.core.converters import Number
from metricbeatpy.core.snapshot import Snapshot

DEFAULT_SIZE = 1028


@runtime_checkable
class Reservoir(Protocol):
    """Port for value reservoirs."""

    def update(self, value: Number) -> None:
        """Record a value."""
        ...

    def size(self) -> int:
        """Return the number of values currently held."""
        ...

    def snapshot(self) -> Snapshot:
        """Return a snapshot of the values currently held."""
        ...


class UniformReservoir:
    """Uniform random sample of every value ever recorded.

    Uses Vitter's algorithm R: the first ``size`` values fill the
    reservoir, each later value replaces a random slot with probability
    ``size / count``.

    Args:
        size: Maximum number of values to keep.
    """

    def __init__(self, size: int = DEFAULT_SIZE, rng: random.Random | None = None) -> None:
        if size <= 0:
            raise ValueError("Reservoir size must be positive")
        self._capacity = size
        self._values: list[Number] = []
        self._count = 0
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    def update(self, value: Number) -> None:
        with self._lock:
            self._count += 1
            if self._count <= self._capacity:
                self._values.append(value)
            else:
                slot = self._rng.randrange(self._count)
                if slot < self._capacity:
                    self._values[slot] = value

    def size(self) -> int:
        with self._lock:
            return len(self._values)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(list(self._values))


class SlidingWindowReservoir:
    """Reservoir holding the last ``size`` recorded values.

    When the window is full, the oldest value is evicted to make room.

    Args:
        size: Number of most recent values to keep.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("Reservoir size must be positive")
        self._buffer: deque[Number] = deque(maxlen=size)
        self._lock = threading.Lock()

    def update(self, value: Number) -> None:
        with self._lock:
            self._buffer.append(value)

    def size(self) -> int:
        with self._lock:
            return len(self._buffer)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(list(self._buffer))
