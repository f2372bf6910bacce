"""HTTP document sinks."""

from metricbeatpy.adapters.http.elasticsearch import (
    AsyncElasticsearchClient,
    ElasticsearchClient,
)

__all__ = ["AsyncElasticsearchClient", "ElasticsearchClient"]
