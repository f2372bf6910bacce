"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from metricbeatpy.core.registry import MetricRegistry

# 2023-12-11T13:06:40Z
FIXED_TIME_MS = 1702300000000


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, tick: int = 0, time_ms: int = FIXED_TIME_MS) -> None:
        self._tick = tick
        self._time_ms = time_ms

    def tick(self) -> int:
        return self._tick

    def time(self) -> int:
        return self._time_ms

    def advance(self, seconds: float = 0.0, nanos: int = 0) -> None:
        delta = int(seconds * 1_000_000_000) + nanos
        self._tick += delta
        self._time_ms += delta // 1_000_000


@dataclass
class RecordedRequest:
    """A request received by the Elasticsearch stub."""

    method: str
    url: str
    headers: dict[str, str]
    body: bytes


@dataclass
class ElasticsearchStub:
    """Fake Elasticsearch endpoint answering every request with ``status``.

    Exposes the same behaviour as an httpx MockTransport handler (sync
    tests) and as an ASGI app (async tests).
    """

    status: int = 201
    requests: list[RecordedRequest] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                url=str(request.url),
                headers=dict(request.headers),
                body=request.read(),
            )
        )
        return httpx.Response(self.status, json={"result": "created"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    async def __call__(self, scope, receive, send) -> None:
        """ASGI interface recording the request and sending ``status``."""
        if scope["type"] != "http":
            return
        body = b""
        more_body = True
        while more_body:
            message = await receive()
            body += message.get("body", b"")
            more_body = message.get("more_body", False)
        url = f"{scope['scheme']}://{scope['server'][0]}{scope['path']}"
        self.requests.append(
            RecordedRequest(
                method=scope["method"],
                url=url,
                headers={k.decode(): v.decode() for k, v in scope["headers"]},
                body=body,
            )
        )
        await send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": [(b"content-type", b"application/json")],
            }
        )
        await send({"type": "http.response.body", "body": b'{"result":"created"}'})

    def asgi_transport(self) -> httpx.ASGITransport:
        return httpx.ASGITransport(app=self)


@pytest.fixture
def clock() -> ManualClock:
    """Provide a manually driven clock."""
    return ManualClock()


@pytest.fixture
def clock_factory() -> Callable[..., ManualClock]:
    """Factory fixture for additional manual clocks."""
    return ManualClock


@pytest.fixture
def registry() -> MetricRegistry:
    """Provide an empty metric registry."""
    return MetricRegistry()


@pytest.fixture
def es_stub() -> ElasticsearchStub:
    """Provide an Elasticsearch stub answering 201 Created."""
    return ElasticsearchStub()


@pytest.fixture
def populated_registry(registry: MetricRegistry, clock: ManualClock) -> MetricRegistry:
    """Registry holding one metric of each kind with known values.

    - gauge: 123
    - counter: 6
    - histogram: 1, 2, 2, 3, 3, 3, 4, 4, 5
    - meter: 4 events
    - timer: 8s, 10s, 14s
    """
    from metricbeatpy.core.converters import TimeUnit
    from metricbeatpy.core.metrics import Meter, Timer

    registry.gauge("gauge", lambda: 123)
    counter = registry.counter("counter")
    for n in (1, 2, 3):
        counter.inc(n)
    histogram = registry.histogram("histogram")
    for value in (1, 2, 2, 3, 3, 3, 4, 4, 5):
        histogram.update(value)
    meter = registry.register("meter", Meter(clock))
    meter.mark(4)
    timer = registry.register("timer", Timer(clock=clock))
    for seconds in (8, 10, 14):
        timer.update(seconds, TimeUnit.SECONDS)
    return registry
