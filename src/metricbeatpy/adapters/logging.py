"""Python logging handler adapter for metricbeatpy.

This adapter bridges Python's standard library logging module to a
MetricRegistry, so the volume of log records per level is exported with
the application's other metrics.
"""

import logging

from metricbeatpy.core.metrics import Meter
from metricbeatpy.core.registry import MetricRegistry

# Standard levels get their own meter, anything else only counts in "all"
_LEVEL_METERS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


class InstrumentedHandler(logging.Handler):
    """Logging handler that marks a meter for every log record.

    Meters are registered up front as ``<prefix>.all`` and
    ``<prefix>.<level>`` for each standard level.

    Example:
        ```python
        from metricbeatpy import InstrumentedHandler, MetricRegistry

        registry = MetricRegistry()
        logging.getLogger().addHandler(InstrumentedHandler(registry))
        ```
    """

    def __init__(
        self,
        registry: MetricRegistry,
        prefix: str = "logging",
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler and register its meters.

        Args:
            registry: Registry the meters are registered in.
            prefix: Name prefix of the meters (default: "logging").
            level: Minimum level of records to count.
        """
        super().__init__(level)
        self._all = registry.meter(f"{prefix}.all")
        self._by_level: dict[int, Meter] = {
            levelno: registry.meter(f"{prefix}.{name}")
            for levelno, name in _LEVEL_METERS.items()
        }

    def emit(self, record: logging.LogRecord) -> None:
        """Count a log record.

        Args:
            record: The log record to count.
        """
        self._all.mark()
        meter = self._by_level.get(record.levelno)
        if meter is not None:
            meter.mark()
