"""Exceptions raised by metricbeatpy."""


class MetricbeatError(Exception):
    """Base class for all metricbeatpy errors."""


class NameCollisionError(MetricbeatError, ValueError):
    """Two metrics map onto overlapping paths in the same metric document.

    Attributes:
        segment: Normalized path segment where the collision was detected.
        path: Full normalized path being resolved.
    """

    def __init__(self, segment: str, path: str) -> None:
        super().__init__(f"Duplicate key {segment} while resolving {path}")
        self.segment = segment
        self.path = path


class TransportError(MetricbeatError):
    """Posting a metric document failed.

    Wraps connection and I/O failures as well as non-success HTTP statuses.

    Attributes:
        status_code: HTTP status of the response, None when no response
            was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
