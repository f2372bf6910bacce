"""BDD step definitions for export cycle features."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from metricbeatpy.adapters.http.elasticsearch import ElasticsearchClient
from metricbeatpy.adapters.reporter import ElasticsearchReporter
from metricbeatpy.core.registry import MetricRegistry


@dataclass
class ExportScenarioContext:
    """State shared between the steps of one scenario."""

    registry: MetricRegistry = field(default_factory=MetricRegistry)
    clock: Any = None
    index_prefix: str = "metricbeat-dropwizard-"
    index_date_format: str = "%Y.%m.%d"
    exception_raised: Exception | None = None


@pytest.fixture
def ctx() -> ExportScenarioContext:
    """Fresh scenario context for each test."""
    return ExportScenarioContext()


def _reporter(ctx: ExportScenarioContext, es_stub) -> ElasticsearchReporter:
    client = ElasticsearchClient(
        "http://es:9200",
        index_prefix=ctx.index_prefix,
        index_date_format=ctx.index_date_format,
        transport=es_stub.transport(),
    )
    return ElasticsearchReporter(ctx.registry, client, hostname="web-01", clock=ctx.clock)


def _posted_documents(es_stub) -> list[dict[str, Any]]:
    return [json.loads(request.body) for request in es_stub.requests]


# === Background Steps ===
@given(parsers.parse('a registry with a counter "{name}" incremented {n:d} times'))
def step_counter(ctx: ExportScenarioContext, name: str, n: int) -> None:
    counter = ctx.registry.counter(name)
    for _ in range(n):
        counter.inc()


@given(parsers.parse('a gauge "{name}" reading {value:d}'))
def step_gauge(ctx: ExportScenarioContext, name: str, value: int) -> None:
    ctx.registry.gauge(name, lambda: value)


@given(parsers.parse("the clock reads {moment}"))
def step_clock(ctx: ExportScenarioContext, clock_factory, moment: str) -> None:
    epoch_ms = int(datetime.fromisoformat(moment).timestamp() * 1000)
    ctx.clock = clock_factory(time_ms=epoch_ms)


# === Setup Steps ===
@given(parsers.parse("an Elasticsearch endpoint answering {status:d}"))
def step_endpoint(es_stub, status: int) -> None:
    es_stub.status = status


@given(parsers.parse('a counter "{name}"'))
def step_plain_counter(ctx: ExportScenarioContext, name: str) -> None:
    ctx.registry.counter(name)


@given(parsers.parse('the index prefix "{prefix}" with date format "{date_format}"'))
def step_index_format(
    ctx: ExportScenarioContext, prefix: str, date_format: str
) -> None:
    ctx.index_prefix = prefix
    ctx.index_date_format = date_format


# === Action Steps ===
@when("an export cycle runs")
def step_report(
    ctx: ExportScenarioContext, es_stub, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="metricbeatpy")
    reporter = _reporter(ctx, es_stub)
    try:
        reporter.report()
    except Exception as e:
        ctx.exception_raised = e
    finally:
        reporter.client.close()


@when("a scheduled export cycle runs")
def step_scheduled_report(
    ctx: ExportScenarioContext, es_stub, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="metricbeatpy")
    reporter = _reporter(ctx, es_stub)
    try:
        reporter._report_safely()
    finally:
        reporter.client.close()


# === Assertion Steps ===
@then("the cycle completes without error")
def step_no_error(ctx: ExportScenarioContext) -> None:
    assert ctx.exception_raised is None


@then(parsers.parse('{count:d} document is posted to index "{index}"'))
def step_document_index(es_stub, count: int, index: str) -> None:
    assert len(es_stub.requests) == count
    assert es_stub.requests[0].url == f"http://es:9200/{index}"


@then("no document is posted")
def step_no_document(es_stub) -> None:
    assert es_stub.requests == []


@then(parsers.parse('the document field "{path}" is {value:d}'))
def step_document_field(es_stub, path: str, value: int) -> None:
    node: Any = _posted_documents(es_stub)[0]
    for key in path.split("."):
        node = node[key]
    assert node == value


@then(parsers.parse('the warning "{message}" is logged'))
def step_warning_logged(caplog: pytest.LogCaptureFixture, message: str) -> None:
    assert any(
        r.levelno == logging.WARNING and r.getMessage() == message
        for r in caplog.records
    )


@then(parsers.parse('the error "{message}" is logged'))
def step_error_logged(caplog: pytest.LogCaptureFixture, message: str) -> None:
    assert any(
        r.levelno == logging.ERROR and r.getMessage() == message
        for r in caplog.records
    )
