"""Scheduled reporters exporting a registry to Elasticsearch.

Each export cycle snapshots every live metric into a MetricSet, encodes it
and posts it as a single document. Cycles never overlap: the thread
reporter runs them on one dedicated thread, the asyncio reporter in one
task. A failed cycle is logged and dropped; the next cycle snapshots the
then-current metric state.
"""

import asyncio
import contextlib
import logging
import threading

import httpx

from metricbeatpy.adapters.http.elasticsearch import (
    AsyncElasticsearchClient,
    ElasticsearchClient,
)
from metricbeatpy.config import ReporterConfig, resolve_hostname
from metricbeatpy.core.clock import DEFAULT_CLOCK, Clock
from metricbeatpy.core.converters import (
    Converter,
    TimeUnit,
    duration_converter,
    identity,
    rate_converter,
)
from metricbeatpy.core.exceptions import TransportError
from metricbeatpy.core.metricset import MetricSet
from metricbeatpy.core.ports import AsyncDocumentSinkPort, DocumentSinkPort
from metricbeatpy.core.registry import MetricFilter, MetricRegistry

logger = logging.getLogger(__name__)

REPORTER_NAME = "elasticsearch-reporter"


def build_metric_set(
    registry: MetricRegistry,
    timestamp: int,
    hostname: str,
    metric_filter: MetricFilter | None = None,
    duration_converter: Converter = identity,
    rate_converter: Converter = identity,
) -> MetricSet:
    """Snapshot every selected metric of a registry into a new MetricSet.

    Metrics are added kind by kind (gauges, counters, histograms, meters,
    timers), each kind sorted by name.

    Args:
        registry: Registry holding the live metrics
        timestamp: Epoch milliseconds of the export cycle
        hostname: Host name written into the document
        metric_filter: Optional predicate selecting metrics
        duration_converter: Conversion applied to timer figures
        rate_converter: Conversion applied to meter and timer rates

    Returns:
        Populated MetricSet

    Raises:
        NameCollisionError: If two metric names map onto overlapping paths.
    """
    metric_set = MetricSet(timestamp, hostname)
    for name, gauge in registry.gauges(metric_filter).items():
        metric_set.add_gauge(name, gauge)
    for name, counter in registry.counters(metric_filter).items():
        metric_set.add_counter(name, counter)
    for name, histogram in registry.histograms(metric_filter).items():
        metric_set.add_histogram(name, histogram)
    for name, meter in registry.meters(metric_filter).items():
        metric_set.add_meter(name, meter, rate_converter)
    for name, timer in registry.timers(metric_filter).items():
        metric_set.add_timer(name, timer, duration_converter, rate_converter)
    return metric_set


class _ReporterBase:
    """Document building shared by the thread and asyncio reporters."""

    def __init__(
        self,
        registry: MetricRegistry,
        hostname: str | None,
        rate_unit: TimeUnit,
        duration_unit: TimeUnit,
        metric_filter: MetricFilter | None,
        interval: float,
        report_on_stop: bool,
        clock: Clock | None,
    ) -> None:
        self.registry = registry
        self.hostname = hostname or resolve_hostname()
        self.rate_unit = rate_unit
        self.duration_unit = duration_unit
        self.metric_filter = metric_filter
        self.interval = interval
        self.report_on_stop = report_on_stop
        self._clock = clock or DEFAULT_CLOCK
        self._rate_converter = rate_converter(rate_unit)
        self._duration_converter = duration_converter(duration_unit)

    def _period(self, interval: float | None) -> float:
        period = interval if interval is not None else self.interval
        if period <= 0:
            raise ValueError(f"interval must be positive, got {period}")
        return period

    def build_metric_set(self) -> MetricSet:
        """Snapshot the registry into the document for one cycle."""
        return build_metric_set(
            self.registry,
            self._clock.time(),
            self.hostname,
            self.metric_filter,
            self._duration_converter,
            self._rate_converter,
        )


class ElasticsearchReporter(_ReporterBase):
    """Reporter running export cycles on a background thread.

    Example:
        ```python
        registry = MetricRegistry()
        config = ReporterConfig(url="http://elasticsearch:9200", doc_type="doc")
        with ElasticsearchReporter.from_config(registry, config) as reporter:
            reporter.start()
            serve_forever()
        ```

    Args:
        registry: Registry to export.
        client: Document sink receiving one document per cycle.
        hostname: Host name written into documents (default: local host).
        rate_unit: Unit rates are reported per (default: seconds).
        duration_unit: Unit durations are reported in (default: milliseconds).
        metric_filter: Predicate selecting exported metrics (default: all).
        interval: Seconds between cycles when ``start()`` gets no interval.
        report_on_stop: Run one last cycle in ``stop()``.
        clock: Time source for document timestamps.
    """

    def __init__(
        self,
        registry: MetricRegistry,
        client: DocumentSinkPort,
        hostname: str | None = None,
        rate_unit: TimeUnit = TimeUnit.SECONDS,
        duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
        metric_filter: MetricFilter | None = None,
        interval: float = 60.0,
        report_on_stop: bool = False,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(
            registry,
            hostname,
            rate_unit,
            duration_unit,
            metric_filter,
            interval,
            report_on_stop,
            clock,
        )
        self.client = client
        self._owns_client = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @classmethod
    def from_config(
        cls,
        registry: MetricRegistry,
        config: ReporterConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> "ElasticsearchReporter":
        """Create a reporter and its ElasticsearchClient from a config."""
        client = ElasticsearchClient(
            config.url,
            username=config.username,
            password=config.password,
            index_prefix=config.index_prefix,
            index_date_format=config.index_date_format,
            doc_type=config.doc_type,
            timeout=config.timeout,
            transport=transport,
        )
        reporter = cls(
            registry,
            client,
            hostname=config.hostname,
            rate_unit=config.rate_unit,
            duration_unit=config.duration_unit,
            metric_filter=config.metric_filter,
            interval=config.interval,
            report_on_stop=config.report_on_stop,
        )
        reporter._owns_client = True
        return reporter

    def report(self) -> None:
        """Run one export cycle.

        Transport failures are logged and the document is dropped.

        Raises:
            NameCollisionError: If two metric names collide in the document.
        """
        metric_set = self.build_metric_set()
        try:
            self.client.post_document(metric_set)
        except TransportError:
            logger.warning("Failed to write metrics in Elasticsearch", exc_info=True)

    def _report_safely(self) -> None:
        try:
            self.report()
        except Exception:
            logger.exception("Export cycle failed, skipping it")

    def _run(self, interval: float) -> None:
        while not self._stop_event.wait(interval):
            self._report_safely()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval: float | None = None) -> None:
        """Start reporting every ``interval`` seconds on a daemon thread.

        Raises:
            RuntimeError: If the reporter is already running.
        """
        if self._thread is not None:
            raise RuntimeError("Reporter already started")
        period = self._period(interval)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, args=(period,), name=REPORTER_NAME, daemon=True
        )
        self._thread.start()
        logger.debug("Started %s every %.3fs", REPORTER_NAME, period)

    def stop(self) -> None:
        """Stop the reporting thread, waiting for a running cycle to end."""
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join()
        self._thread = None
        if self.report_on_stop:
            self._report_safely()

    def close(self) -> None:
        """Stop reporting and close the client if this reporter created it."""
        self.stop()
        if self._owns_client and isinstance(self.client, ElasticsearchClient):
            self.client.close()

    def __enter__(self) -> "ElasticsearchReporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncElasticsearchReporter(_ReporterBase):
    """Reporter running export cycles in an asyncio task.

    Takes the same arguments as ElasticsearchReporter, with an
    AsyncDocumentSinkPort as client.
    """

    def __init__(
        self,
        registry: MetricRegistry,
        client: AsyncDocumentSinkPort,
        hostname: str | None = None,
        rate_unit: TimeUnit = TimeUnit.SECONDS,
        duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
        metric_filter: MetricFilter | None = None,
        interval: float = 60.0,
        report_on_stop: bool = False,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(
            registry,
            hostname,
            rate_unit,
            duration_unit,
            metric_filter,
            interval,
            report_on_stop,
            clock,
        )
        self.client = client
        self._owns_client = False
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_config(
        cls,
        registry: MetricRegistry,
        config: ReporterConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "AsyncElasticsearchReporter":
        """Create a reporter and its AsyncElasticsearchClient from a config."""
        client = AsyncElasticsearchClient(
            config.url,
            username=config.username,
            password=config.password,
            index_prefix=config.index_prefix,
            index_date_format=config.index_date_format,
            doc_type=config.doc_type,
            timeout=config.timeout,
            transport=transport,
        )
        reporter = cls(
            registry,
            client,
            hostname=config.hostname,
            rate_unit=config.rate_unit,
            duration_unit=config.duration_unit,
            metric_filter=config.metric_filter,
            interval=config.interval,
            report_on_stop=config.report_on_stop,
        )
        reporter._owns_client = True
        return reporter

    async def report(self) -> None:
        """Run one export cycle; transport failures are logged and dropped."""
        metric_set = self.build_metric_set()
        try:
            await self.client.post_document(metric_set)
        except TransportError:
            logger.warning("Failed to write metrics in Elasticsearch", exc_info=True)

    async def _report_safely(self) -> None:
        try:
            await self.report()
        except Exception:
            logger.exception("Export cycle failed, skipping it")

    async def run(self, interval: float | None = None) -> None:
        """Report every ``interval`` seconds until cancelled."""
        period = self._period(interval)
        while True:
            await asyncio.sleep(period)
            await self._report_safely()

    def start(self, interval: float | None = None) -> "asyncio.Task[None]":
        """Schedule ``run()`` as a task on the running event loop.

        Raises:
            RuntimeError: If the reporter is already running.
            ValueError: If the interval is not positive.
        """
        if self._task is not None:
            raise RuntimeError("Reporter already started")
        period = self._period(interval)
        self._task = asyncio.create_task(self.run(period), name=REPORTER_NAME)
        return self._task

    async def stop(self) -> None:
        """Cancel the reporting task."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        finally:
            self._task = None
        if self.report_on_stop:
            await self._report_safely()

    async def aclose(self) -> None:
        """Stop reporting and close the client if this reporter created it."""
        await self.stop()
        if self._owns_client and isinstance(self.client, AsyncElasticsearchClient):
            await self.client.aclose()

    async def __aenter__(self) -> "AsyncElasticsearchReporter":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
