"""Elasticsearch clients posting one metric document per export cycle.

Documents go to a time-bucketed index:
``<base_url>/<index_prefix><date>[/<doc_type>]``, where ``<date>`` is the
cycle timestamp rendered in UTC with ``index_date_format``.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

import httpx

from metricbeatpy.core.encoding.document import encode_document
from metricbeatpy.core.exceptions import TransportError
from metricbeatpy.core.metricset import MetricSet

logger = logging.getLogger(__name__)

DateFormat = str | Callable[[datetime], str]

DEFAULT_URL = "http://localhost:9200/"
DEFAULT_INDEX_PREFIX = "metricbeat-dropwizard-"
DEFAULT_INDEX_DATE_FORMAT = "%Y.%m.%d"
DEFAULT_TIMEOUT = 10.0

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json;charset=UTF-8",
}


def _build_auth(username: str | None, password: str | None) -> httpx.BasicAuth | None:
    """Return Basic auth only when both username and password are set."""
    if not username or not password:
        return None
    return httpx.BasicAuth(username, password)


def _check_response(response: httpx.Response) -> None:
    """Raise TransportError unless the status is below 300."""
    if response.status_code >= 300:
        raise TransportError(
            f"Elasticsearch response failed, code {response.status_code}, "
            f"message {response.reason_phrase}",
            status_code=response.status_code,
        )
    logger.debug(
        "Posted metric document to %s (status %d)",
        response.request.url,
        response.status_code,
    )


class _ElasticsearchTarget:
    """Index naming shared by the sync and async clients."""

    def __init__(
        self,
        base_url: str,
        index_prefix: str,
        index_date_format: DateFormat,
        doc_type: str | None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.index_prefix = (
            index_prefix if index_prefix.endswith("-") else index_prefix + "-"
        )
        self.index_date_format = index_date_format
        self.doc_type = doc_type

    def index_name(self, timestamp: int) -> str:
        """Return the index for a document stamped ``timestamp`` (epoch ms)."""
        moment = datetime.fromtimestamp(timestamp / 1000, tz=UTC)
        if callable(self.index_date_format):
            suffix = self.index_date_format(moment)
        else:
            suffix = moment.strftime(self.index_date_format)
        return self.index_prefix + suffix

    def document_url(self, timestamp: int) -> str:
        url = self.base_url + self.index_name(timestamp)
        if self.doc_type is not None:
            url += "/" + self.doc_type
        return url


class ElasticsearchClient(_ElasticsearchTarget):
    """Blocking client implementing DocumentSinkPort.

    Example:
        ```python
        with ElasticsearchClient("http://localhost:9200", doc_type="doc") as client:
            client.post_document(metric_set)
        ```

    Args:
        base_url: Elasticsearch base URL (e.g., "http://localhost:9200").
        username: Basic auth user, ignored unless password is also set.
        password: Basic auth password, ignored unless username is also set.
        index_prefix: Index name prefix; a trailing "-" is added if missing.
        index_date_format: strftime pattern or callable rendering the date
            suffix of the index name.
        doc_type: Optional document type appended to the URL.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        username: str | None = None,
        password: str | None = None,
        index_prefix: str = DEFAULT_INDEX_PREFIX,
        index_date_format: DateFormat = DEFAULT_INDEX_DATE_FORMAT,
        doc_type: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, index_prefix, index_date_format, doc_type)
        self._client = httpx.Client(
            auth=_build_auth(username, password),
            timeout=timeout,
            transport=transport,
        )

    def post_document(self, metric_set: MetricSet) -> None:
        """POST the encoded metric set to its time-bucketed index.

        Raises:
            TransportError: On connection failure or an HTTP status >= 300.
        """
        url = self.document_url(metric_set.timestamp)
        try:
            response = self._client.post(
                url, content=encode_document(metric_set), headers=_HEADERS
            )
        except httpx.HTTPError as e:
            raise TransportError("Elasticsearch connection failed") from e
        _check_response(response)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ElasticsearchClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncElasticsearchClient(_ElasticsearchTarget):
    """Asyncio client implementing AsyncDocumentSinkPort.

    Takes the same arguments as ElasticsearchClient; ``transport`` must be
    an async transport such as ``httpx.ASGITransport``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        username: str | None = None,
        password: str | None = None,
        index_prefix: str = DEFAULT_INDEX_PREFIX,
        index_date_format: DateFormat = DEFAULT_INDEX_DATE_FORMAT,
        doc_type: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, index_prefix, index_date_format, doc_type)
        self._client = httpx.AsyncClient(
            auth=_build_auth(username, password),
            timeout=timeout,
            transport=transport,
        )

    async def post_document(self, metric_set: MetricSet) -> None:
        """POST the encoded metric set to its time-bucketed index.

        Raises:
            TransportError: On connection failure or an HTTP status >= 300.
        """
        url = self.document_url(metric_set.timestamp)
        try:
            response = await self._client.post(
                url, content=encode_document(metric_set), headers=_HEADERS
            )
        except httpx.HTTPError as e:
            raise TransportError("Elasticsearch connection failed") from e
        _check_response(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncElasticsearchClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
