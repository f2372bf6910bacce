"""metricbeatpy: export in-process metrics to Elasticsearch.

Metrics live in a MetricRegistry; a reporter periodically snapshots them
into a MetricSet and posts it as one Metricbeat-style JSON document.
"""

from metricbeatpy.adapters.http.elasticsearch import (
    AsyncElasticsearchClient,
    ElasticsearchClient,
)
from metricbeatpy.adapters.logging import InstrumentedHandler
from metricbeatpy.adapters.reporter import (
    AsyncElasticsearchReporter,
    ElasticsearchReporter,
    build_metric_set,
)
from metricbeatpy.config import ReporterConfig
from metricbeatpy.core.converters import (
    TimeUnit,
    duration_converter,
    identity,
    rate_converter,
)
from metricbeatpy.core.encoding.document import build_document, encode_document
from metricbeatpy.core.exceptions import (
    MetricbeatError,
    NameCollisionError,
    TransportError,
)
from metricbeatpy.core.metrics import Counter, Gauge, Histogram, Meter, Timer
from metricbeatpy.core.metricset import MetricSet
from metricbeatpy.core.names import normalize_name
from metricbeatpy.core.registry import MetricRegistry
from metricbeatpy.core.reservoirs import SlidingWindowReservoir, UniformReservoir

__all__ = [
    "AsyncElasticsearchClient",
    "AsyncElasticsearchReporter",
    "Counter",
    "ElasticsearchClient",
    "ElasticsearchReporter",
    "Gauge",
    "Histogram",
    "InstrumentedHandler",
    "Meter",
    "MetricRegistry",
    "MetricSet",
    "MetricbeatError",
    "NameCollisionError",
    "ReporterConfig",
    "SlidingWindowReservoir",
    "TimeUnit",
    "Timer",
    "TransportError",
    "UniformReservoir",
    "build_document",
    "build_metric_set",
    "duration_converter",
    "encode_document",
    "identity",
    "normalize_name",
    "rate_converter",
]
