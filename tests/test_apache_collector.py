"""Tests for the Apache collector's collect-on-scrape contract."""

from __future__ import annotations

import logging
import threading
import time

import pytest

from apache_exporter.collectors import ApacheCollector, CollectorState
from apache_exporter.errors import FetchError, StatusError
from apache_exporter.metrics import COUNTER, GAUGE, MetricSnapshot
from fakes import BlockingFetcher, FakeFetcher

FAILURES = "apache_exporter_scrape_failures_total"
DATA_METRICS = {
    "apache_accesses_total",
    "apache_sent_kilobytes_total",
    "apache_uptime_seconds_total",
    "apache_threads",
    "apache_workers",
}


def _snapshot(collector: ApacheCollector) -> MetricSnapshot:
    return MetricSnapshot(families=collector.collect())


def test_publishes_parsed_fields(fetcher):
    snap = _snapshot(ApacheCollector(fetcher))

    assert snap.names() == [
        "apache_accesses_total",
        "apache_sent_kilobytes_total",
        "apache_uptime_seconds_total",
        "apache_workers",
    ]
    assert snap.value("apache_accesses_total") == 1000
    assert snap.value("apache_sent_kilobytes_total") == 50
    assert snap.value("apache_uptime_seconds_total") == 3600
    assert snap.value("apache_workers", state="busy") == 2
    assert snap.value("apache_workers", state="idle") == 8
    assert snap.get("apache_accesses_total").type == COUNTER
    assert snap.get("apache_workers").type == GAUGE
    assert snap.get(FAILURES) is None


def test_publishes_threads_from_sum_row():
    body = (
        "Uptime: 10\n"
        "<td>Sum</td><td>1</td><td>0</td><td>3</td><td>5</td><td>y</td><td>z</td><td>w</td>\n"
    )
    snap = _snapshot(ApacheCollector(FakeFetcher(body)))

    assert snap.value("apache_threads", state="busy") == 3
    assert snap.value("apache_threads", state="idle") == 5
    assert [s.label_dict for s in snap.get("apache_threads").samples] == [
        {"state": "busy"},
        {"state": "idle"},
    ]


def test_same_document_gives_identical_snapshots(fetcher):
    collector = ApacheCollector(fetcher)
    assert collector.collect() == collector.collect()
    assert fetcher.calls == 2


def test_parse_failure_publishes_only_failure_counter():
    collector = ApacheCollector(FakeFetcher("Total Accesses: 1000\nUptime: notanumber\n"))
    snap = _snapshot(collector)

    assert snap.names() == [FAILURES]
    assert snap.value(FAILURES) == 1
    assert not DATA_METRICS & set(snap.names())
    assert collector.scrape_failures == 1


@pytest.mark.parametrize("uptime", ["1e400", "\u0661\u0662"])
def test_out_of_range_or_non_ascii_value_is_a_failure(uptime):
    collector = ApacheCollector(FakeFetcher(f"Uptime: {uptime}\n"))
    snap = _snapshot(collector)

    assert snap.names() == [FAILURES]
    assert collector.scrape_failures == 1


def test_upstream_503_counts_as_failure():
    err = StatusError(status_code=503, reason="Service Unavailable", detail="busy")
    collector = ApacheCollector(FakeFetcher(error=err))
    snap = _snapshot(collector)

    assert snap.names() == [FAILURES]
    assert snap.value(FAILURES) == 1


def test_failure_counter_is_monotonic_across_cycles():
    fetcher = FakeFetcher(error=FetchError(uri="http://x", reason="connection refused"))
    collector = ApacheCollector(fetcher)

    assert _snapshot(collector).value(FAILURES) == 1

    fetcher.error = None
    ok = _snapshot(collector)
    assert ok.get(FAILURES) is None
    assert collector.scrape_failures == 1

    fetcher.error = FetchError(uri="http://x", reason="connection refused")
    assert _snapshot(collector).value(FAILURES) == 2


def test_failure_is_logged(caplog):
    collector = ApacheCollector(FakeFetcher("Uptime: nope\n"))
    with caplog.at_level(logging.ERROR, logger="apache_exporter.collectors.apache"):
        collector.collect()

    record = next(r for r in caplog.records if "Error scraping apache" in r.getMessage())
    assert record.error_kind == "parse_error"
    assert record.scrape_uri == FakeFetcher.uri


def test_state_walks_through_cycle():
    seen: list[CollectorState] = []

    class RecordingFetcher(FakeFetcher):
        def fetch(self) -> str:
            seen.append(collector.state)
            return super().fetch()

    collector = ApacheCollector(RecordingFetcher())
    assert collector.state is CollectorState.IDLE
    collector.collect()

    assert seen == [CollectorState.FETCHING]
    assert collector.state is CollectorState.IDLE


def test_unexpected_error_propagates_and_resets_state():
    collector = ApacheCollector(FakeFetcher(error=RuntimeError("bug")))
    with pytest.raises(RuntimeError):
        collector.collect()

    assert collector.state is CollectorState.IDLE
    assert collector.scrape_failures == 0


def test_custom_namespace(fetcher):
    snap = _snapshot(ApacheCollector(fetcher, namespace="web"))
    assert "web_accesses_total" in snap.names()


def test_concurrent_collects_are_serialized():
    fetcher = BlockingFetcher()
    collector = ApacheCollector(fetcher)
    results: list[MetricSnapshot] = []

    def scrape() -> None:
        results.append(_snapshot(collector))

    first = threading.Thread(target=scrape)
    first.start()
    assert fetcher.entered.wait(timeout=5.0)

    second = threading.Thread(target=scrape)
    second.start()
    time.sleep(0.1)
    # The second scrape is parked on the collector lock, not in fetch().
    assert fetcher.calls == 1

    fetcher.release.set()
    first.join(timeout=5.0)
    second.join(timeout=5.0)

    assert fetcher.calls == 2
    assert fetcher.max_active == 1
    assert len(results) == 2
    assert all(r.value("apache_uptime_seconds_total") == 3600 for r in results)
