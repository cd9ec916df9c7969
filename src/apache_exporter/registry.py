"""Explicit metrics registry."""

from __future__ import annotations

import logging

from .collectors.base import BaseCollector
from .metrics import MetricSnapshot

log = logging.getLogger(__name__)


class MetricsRegistry:
    """Holds collectors and gathers their output into one snapshot.

    Built once at startup and handed to whatever serves the metrics; there is
    no process-wide default registry.
    """

    def __init__(self) -> None:
        self._collectors: list[BaseCollector] = []

    def register(self, collector: BaseCollector) -> None:
        if any(c.name == collector.name for c in self._collectors):
            raise ValueError(f"Collector already registered: {collector.name}")
        self._collectors.append(collector)
        log.debug("registered collector %s", collector.name)

    def get(self, name: str) -> BaseCollector | None:
        for collector in self._collectors:
            if collector.name == name:
                return collector
        return None

    @property
    def collectors(self) -> tuple[BaseCollector, ...]:
        return tuple(self._collectors)

    def collect(self) -> MetricSnapshot:
        snapshot = MetricSnapshot()
        for collector in self._collectors:
            snapshot.families.extend(collector.collect())
        return snapshot
