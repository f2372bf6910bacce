"""Report application metrics to a local Elasticsearch every 10 seconds.

Run with:
    python examples/report_to_elasticsearch.py

Then query the daily index:
    curl "http://localhost:9200/metricbeat-dropwizard-*/_search?pretty"
"""

import logging
import random
import time

from metricbeatpy import (
    ElasticsearchReporter,
    InstrumentedHandler,
    MetricRegistry,
    ReporterConfig,
    TimeUnit,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("example")


def main() -> None:
    registry = MetricRegistry()
    logging.getLogger().addHandler(InstrumentedHandler(registry, prefix="app.logging"))

    jobs = registry.counter("app.jobs.completed")
    latency = registry.timer("app.jobs.latency")
    queue: list[int] = []
    registry.gauge("app.queue.depth", lambda: len(queue))

    config = ReporterConfig(
        url="http://localhost:9200",
        doc_type="doc",
        interval=10.0,
        duration_unit=TimeUnit.MILLISECONDS,
        report_on_stop=True,
    )
    with ElasticsearchReporter.from_config(registry, config) as reporter:
        reporter.start()
        try:
            while True:
                queue.append(1)
                with latency.time():
                    time.sleep(random.uniform(0.01, 0.2))
                queue.pop()
                jobs.inc()
                logger.info("Job done")
        except KeyboardInterrupt:
            logger.info("Shutting down")


if __name__ == "__main__":
    main()
