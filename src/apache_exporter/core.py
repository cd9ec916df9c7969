"""Wiring of fetcher, collectors and registry."""

from __future__ import annotations

from .collectors import ApacheCollector, ProcessCollector
from .fetcher import StatusFetcher
from .registry import MetricsRegistry


def build_registry(
    *,
    scrape_uri: str,
    insecure: bool = False,
    timeout: float | None = None,
    include_process_metrics: bool = True,
) -> MetricsRegistry:
    """Build the registry served by the exporter.

    Args:
        scrape_uri: Apache status page URI
        insecure: Skip TLS certificate verification upstream
        timeout: Upstream fetch timeout in seconds (None for no deadline)
        include_process_metrics: Also report the exporter's own process metrics

    Returns:
        Registry with the Apache collector first
    """
    fetcher = StatusFetcher(scrape_uri, insecure=insecure, timeout=timeout)

    registry = MetricsRegistry()
    registry.register(ApacheCollector(fetcher))
    if include_process_metrics:
        registry.register(ProcessCollector())
    return registry
