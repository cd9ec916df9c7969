"""Apache mod_status collector."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Protocol

from ..errors import ScrapeError
from ..metrics import MetricFamily, counter, gauge
from ..status import ParsedFields, parse_status
from .base import BaseCollector

log = logging.getLogger(__name__)

NAMESPACE = "apache"

_STATES = ("busy", "idle")


class Fetcher(Protocol):
    uri: str

    def fetch(self) -> str: ...


class CollectorState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    PUBLISHING = "publishing"
    FAILED = "failed"


class ApacheCollector(BaseCollector):
    """Fetch, parse and publish the status page on every collect.

    The whole cycle runs under one lock, so concurrent scrapes never see each
    other's half-built state. A failed cycle publishes only the scrape failure
    counter.
    """

    def __init__(self, fetcher: Fetcher, *, namespace: str = NAMESPACE) -> None:
        self._fetcher = fetcher
        self._namespace = namespace
        self._lock = threading.Lock()
        self._state = CollectorState.IDLE
        self._scrape_failures = 0

    @property
    def name(self) -> str:
        return "apache"

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def scrape_failures(self) -> int:
        return self._scrape_failures

    def _transition(self, state: CollectorState) -> None:
        log.debug("collector %s -> %s", self._state.value, state.value)
        self._state = state

    def collect(self) -> list[MetricFamily]:
        with self._lock:
            try:
                self._transition(CollectorState.FETCHING)
                body = self._fetcher.fetch()

                self._transition(CollectorState.PARSING)
                fields = parse_status(body)

                self._transition(CollectorState.PUBLISHING)
                return self._publish(fields)

            except ScrapeError as e:
                self._transition(CollectorState.FAILED)
                self._scrape_failures += 1
                log.error(
                    "Error scraping apache: %s",
                    e,
                    extra={"scrape_uri": self._fetcher.uri, "error_kind": e.kind},
                )
                return [self._failures_family()]

            finally:
                self._transition(CollectorState.IDLE)

    def _metric(self, name: str) -> str:
        return f"{self._namespace}_{name}"

    def _failures_family(self) -> MetricFamily:
        return counter(
            self._metric("exporter_scrape_failures_total"),
            "Number of errors while scraping apache.",
            self._scrape_failures,
        )

    def _publish(self, fields: ParsedFields) -> list[MetricFamily]:
        families: list[MetricFamily] = []

        if fields.accesses_total is not None:
            families.append(
                counter(
                    self._metric("accesses_total"),
                    "Current total apache accesses",
                    fields.accesses_total,
                )
            )
        if fields.kbytes_total is not None:
            families.append(
                counter(
                    self._metric("sent_kilobytes_total"),
                    "Current total kbytes sent",
                    fields.kbytes_total,
                )
            )
        if fields.uptime_seconds is not None:
            families.append(
                counter(
                    self._metric("uptime_seconds_total"),
                    "Current uptime in seconds",
                    fields.uptime_seconds,
                )
            )

        for suffix, doc, values in (
            ("threads", "Apache thread statuses", fields.threads),
            ("workers", "Apache worker statuses", fields.workers),
        ):
            if not values:
                continue
            family = gauge(self._metric(suffix), doc)
            for state in _STATES:
                if state in values:
                    family.add_sample(values[state], {"state": state})
            families.append(family)

        return families
