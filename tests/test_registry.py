from __future__ import annotations

import pytest

from apache_exporter.collectors import ApacheCollector, BaseCollector, ProcessCollector
from apache_exporter.core import build_registry
from apache_exporter.fetcher import StatusFetcher
from apache_exporter.metrics import MetricFamily, gauge
from apache_exporter.registry import MetricsRegistry


class StaticCollector(BaseCollector):
    def __init__(self, name: str, metric: str) -> None:
        self._name = name
        self._metric = metric

    @property
    def name(self) -> str:
        return self._name

    def collect(self) -> list[MetricFamily]:
        return [gauge(self._metric, "static", 1)]


def test_collects_in_registration_order():
    registry = MetricsRegistry()
    registry.register(StaticCollector("b", "metric_b"))
    registry.register(StaticCollector("a", "metric_a"))

    assert registry.collect().names() == ["metric_b", "metric_a"]


def test_rejects_duplicate_names():
    registry = MetricsRegistry()
    registry.register(StaticCollector("a", "m"))
    with pytest.raises(ValueError, match="already registered"):
        registry.register(StaticCollector("a", "other"))


def test_get():
    registry = MetricsRegistry()
    collector = StaticCollector("a", "m")
    registry.register(collector)
    assert registry.get("a") is collector
    assert registry.get("missing") is None


def test_each_collect_is_a_fresh_snapshot():
    registry = MetricsRegistry()
    registry.register(StaticCollector("a", "m"))
    first = registry.collect()
    second = registry.collect()
    assert first == second
    assert first is not second
    assert first.families[0] is not second.families[0]


def test_build_registry_wires_collectors():
    registry = build_registry(scrape_uri="http://apache.test/server-status/?auto", timeout=3)

    assert [c.name for c in registry.collectors] == ["apache", "process"]
    apache = registry.get("apache")
    assert isinstance(apache, ApacheCollector)
    assert isinstance(registry.get("process"), ProcessCollector)
    assert isinstance(apache._fetcher, StatusFetcher)
    assert apache._fetcher.timeout == 3


def test_build_registry_without_process_metrics():
    registry = build_registry(scrape_uri="http://x/", include_process_metrics=False)
    assert [c.name for c in registry.collectors] == ["apache"]
