"""CLI interface for apache-exporter."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Any

from .collectors import ApacheCollector
from .config import Settings, parse_listen_address, settings
from .core import build_registry
from .formatters import get_formatter
from .logging import configure_logging
from .registry import MetricsRegistry
from .server import MetricsServer
from .utils import output_text

log = logging.getLogger(__name__)


def _registry_from_args(args: argparse.Namespace) -> MetricsRegistry:
    return build_registry(
        scrape_uri=args.scrape_uri,
        insecure=args.insecure,
        timeout=args.timeout or None,
        include_process_metrics=args.process_metrics,
    )


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve metrics until SIGINT/SIGTERM."""
    try:
        host, port = parse_listen_address(args.listen_address)
    except ValueError as e:
        sys.stderr.write(f"Error: --telemetry.address: {e}\n")
        return 2

    server = MetricsServer(
        _registry_from_args(args),
        host=host,
        port=port,
        telemetry_path=args.telemetry_path,
    )

    log.info("Starting Server: %s", args.listen_address, extra={"address": args.listen_address})
    try:
        server.start()
    except OSError as e:
        log.error("Failed to listen on %s: %s", args.listen_address, e)
        return 1

    stop = threading.Event()

    def _signal_handler(signum: int, frame: Any) -> None:
        log.info("Shutdown requested (signal %d)", signum)
        stop.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    stop.wait()
    server.stop()
    return 0


def cmd_scrape(args: argparse.Namespace) -> int:
    """Collect once and print the result."""
    registry = _registry_from_args(args)
    collector = registry.get("apache")
    failures_before = collector.scrape_failures if isinstance(collector, ApacheCollector) else 0

    snapshot = registry.collect()
    formatter = get_formatter(args.format)
    output_text(formatter.format(snapshot), args.output)

    if isinstance(collector, ApacheCollector) and collector.scrape_failures > failures_before:
        return 1
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version."""
    from . import __version__

    sys.stdout.write(f"apache-exporter version {__version__}\n")
    return 0


def build_parser(config: Settings | None = None) -> argparse.ArgumentParser:
    """Build argument parser; defaults come from *config* (environment)."""
    cfg = config or settings
    parser = argparse.ArgumentParser(
        prog="apache-exporter",
        description="Prometheus exporter for the Apache mod_status page",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "--telemetry.address",
        dest="listen_address",
        default=cfg.listen_address,
        help=f"Address on which to expose metrics (default: {cfg.listen_address})",
    )
    parser.add_argument(
        "--telemetry.endpoint",
        dest="telemetry_path",
        default=cfg.telemetry_path,
        help=f"Path under which to expose metrics (default: {cfg.telemetry_path})",
    )
    parser.add_argument(
        "--scrape_uri",
        dest="scrape_uri",
        default=cfg.scrape_uri,
        help=f"URI to apache stub status page (default: {cfg.scrape_uri})",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        default=cfg.insecure,
        help="Ignore server certificate if using https",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=cfg.timeout_seconds,
        help="Upstream fetch timeout in seconds, 0 for none (default: %(default)s)",
    )
    parser.add_argument(
        "--no-process-metrics",
        dest="process_metrics",
        action="store_false",
        default=cfg.process_metrics,
        help="Do not export the exporter's own process metrics",
    )
    parser.add_argument(
        "--log-level",
        default=cfg.log_level,
        help=f"Log level (default: {cfg.log_level})",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_serve = subparsers.add_parser(
        "serve",
        help="Serve metrics over HTTP (default)",
    )
    p_serve.set_defaults(func=cmd_serve)

    p_scrape = subparsers.add_parser(
        "scrape",
        help="Scrape once and print the metrics",
    )
    p_scrape.add_argument(
        "--format",
        "-f",
        choices=["prometheus", "json"],
        default="prometheus",
        help="Output format (default: prometheus)",
    )
    p_scrape.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )
    p_scrape.set_defaults(func=cmd_scrape)

    p_version = subparsers.add_parser(
        "version",
        help="Show version",
    )
    p_version.set_defaults(func=cmd_version)

    parser.set_defaults(func=cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    if args.version:
        rc = cmd_version(args)
        raise SystemExit(rc)

    rc = int(args.func(args))
    raise SystemExit(rc)
