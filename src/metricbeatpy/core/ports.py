"""Port interfaces for document sinks.

The reporters depend only on these protocols, not on a concrete HTTP
client, so any object able to post a MetricSet can receive documents.
"""

from typing import Protocol, runtime_checkable

from metricbeatpy.core.metricset import MetricSet


@runtime_checkable
class DocumentSinkPort(Protocol):
    """Port for synchronous document delivery.

    Examples: ElasticsearchClient.
    """

    def post_document(self, metric_set: MetricSet) -> None:
        """Deliver one metric document.

        Raises:
            TransportError: If the document could not be delivered.
        """
        ...


@runtime_checkable
class AsyncDocumentSinkPort(Protocol):
    """Port for asynchronous document delivery.

    Examples: AsyncElasticsearchClient.
    """

    async def post_document(self, metric_set: MetricSet) -> None:
        """Deliver one metric document.

        Raises:
            TransportError: If the document could not be delivered.
        """
        ...
