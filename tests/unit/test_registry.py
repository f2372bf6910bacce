"""Tests for MetricRegistry."""

import pytest

from metricbeatpy.core.metrics import Counter, Gauge, Histogram, Meter, Timer
from metricbeatpy.core.registry import MetricRegistry


@pytest.mark.core
class TestMetricRegistry:
    """Tests for registering and listing metrics."""

    def test_typed_accessors_return_same_instance(
        self, registry: MetricRegistry
    ) -> None:
        """counter(), histogram(), meter() and timer() are get-or-create."""
        assert registry.counter("c") is registry.counter("c")
        assert registry.histogram("h") is registry.histogram("h")
        assert registry.meter("m") is registry.meter("m")
        assert registry.timer("t") is registry.timer("t")

    def test_typed_accessors_create_expected_kinds(
        self, registry: MetricRegistry
    ) -> None:
        assert isinstance(registry.counter("c"), Counter)
        assert isinstance(registry.histogram("h"), Histogram)
        assert isinstance(registry.meter("m"), Meter)
        assert isinstance(registry.timer("t"), Timer)

    def test_accessor_rejects_name_used_by_other_kind(
        self, registry: MetricRegistry
    ) -> None:
        """A name belongs to one metric kind only."""
        registry.counter("requests")
        with pytest.raises(ValueError, match="different type"):
            registry.meter("requests")

    def test_register_rejects_duplicate_name(self, registry: MetricRegistry) -> None:
        registry.gauge("queue.depth", lambda: 1)
        with pytest.raises(ValueError, match="already exists"):
            registry.gauge("queue.depth", lambda: 2)

    def test_gauge_registers_supplier(self, registry: MetricRegistry) -> None:
        gauge = registry.gauge("answer", lambda: 42)
        assert isinstance(gauge, Gauge)
        assert registry.gauges() == {"answer": gauge}

    def test_views_are_sorted_by_name(self, registry: MetricRegistry) -> None:
        """Per-kind views list metrics alphabetically."""
        for name in ["zeta", "alpha", "mid"]:
            registry.counter(name)
        assert list(registry.counters()) == ["alpha", "mid", "zeta"]

    def test_views_only_contain_their_kind(self, registry: MetricRegistry) -> None:
        registry.counter("c")
        registry.meter("m")
        assert list(registry.counters()) == ["c"]
        assert list(registry.meters()) == ["m"]
        assert registry.timers() == {}

    def test_views_apply_filter(self, registry: MetricRegistry) -> None:
        """The metric filter selects metrics by name and metric."""
        registry.counter("http.requests")
        registry.counter("db.queries")
        selected = registry.counters(lambda name, metric: name.startswith("http."))
        assert list(selected) == ["http.requests"]

    def test_remove(self, registry: MetricRegistry) -> None:
        registry.counter("c")
        assert registry.remove("c") is True
        assert registry.remove("c") is False
        assert registry.names() == []

    def test_names_are_sorted(self, registry: MetricRegistry) -> None:
        registry.timer("b")
        registry.counter("a")
        assert registry.names() == ["a", "b"]
