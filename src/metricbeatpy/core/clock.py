"""Clock abstraction used by meters, timers and reporters."""

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of elapsed time and wall-clock time."""

    def tick(self) -> int:
        """Return a monotonic reading in nanoseconds."""
        ...

    def time(self) -> int:
        """Return the current epoch time in milliseconds."""
        ...


class SystemClock:
    """Clock backed by the interpreter's monotonic and wall clocks."""

    def tick(self) -> int:
        return time.monotonic_ns()

    def time(self) -> int:
        return time.time_ns() // 1_000_000


DEFAULT_CLOCK = SystemClock()
