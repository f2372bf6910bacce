"""Reporter configuration."""

import socket
from dataclasses import dataclass, field

import httpx

from metricbeatpy.adapters.http.elasticsearch import (
    DEFAULT_INDEX_DATE_FORMAT,
    DEFAULT_INDEX_PREFIX,
    DEFAULT_TIMEOUT,
    DEFAULT_URL,
    DateFormat,
)
from metricbeatpy.core.converters import TimeUnit
from metricbeatpy.core.registry import MetricFilter


def resolve_hostname() -> str:
    """Return the local host name, or "unknown" if it cannot be determined."""
    try:
        return socket.gethostname() or "unknown"
    except OSError:
        return "unknown"


@dataclass
class ReporterConfig:
    """Settings for an Elasticsearch reporter.

    Attributes:
        url: Elasticsearch base URL.
        username: Basic auth user (only used together with password).
        password: Basic auth password (only used together with username).
        index_prefix: Index name prefix (e.g., "metrics-").
        index_date_format: strftime pattern or callable for the index date
            suffix (e.g., "%Y.%m" for monthly indices).
        doc_type: Document type appended to the URL, None to omit.
        hostname: Host name written into documents, resolved from the
            local host when not given.
        rate_unit: Unit rates are reported per.
        duration_unit: Unit timer durations are reported in.
        metric_filter: Predicate selecting which metrics are exported.
        interval: Seconds between export cycles.
        timeout: HTTP request timeout in seconds.
        report_on_stop: Run one last export cycle when the reporter stops.
    """

    url: str = DEFAULT_URL
    username: str | None = None
    password: str | None = None
    index_prefix: str = DEFAULT_INDEX_PREFIX
    index_date_format: DateFormat = DEFAULT_INDEX_DATE_FORMAT
    doc_type: str | None = None
    hostname: str = field(default_factory=resolve_hostname)
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
    metric_filter: MetricFilter | None = None
    interval: float = 60.0
    timeout: float = DEFAULT_TIMEOUT
    report_on_stop: bool = False

    def __post_init__(self) -> None:
        _validate_url(self.url)
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


def _validate_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid Elasticsearch URL: {url}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"Invalid Elasticsearch URL: {url}")
