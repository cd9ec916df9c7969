"""HTTP listener serving the metrics snapshot."""

from __future__ import annotations

import errno
import logging
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlparse

from . import __version__
from .formatters import BaseFormatter, PrometheusFormatter
from .registry import MetricsRegistry

log = logging.getLogger(__name__)

_NO_IPV6_ERRNOS = (errno.EAFNOSUPPORT, errno.EADDRNOTAVAIL, errno.EPROTONOSUPPORT)


class _MetricsHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(
        self,
        server_address: tuple[str, int],
        request_handler_class: type[BaseHTTPRequestHandler],
        exporter_ref: MetricsServer,
    ) -> None:
        super().__init__(server_address, request_handler_class)
        self.exporter_ref = exporter_ref


class _MetricsHTTPServerV6(_MetricsHTTPServer):
    address_family = socket.AF_INET6


class _MetricsHTTPServerDualStack(_MetricsHTTPServerV6):
    """Listen on every IPv6 and IPv4 address through one socket."""

    def server_bind(self) -> None:
        self.socket.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
        super().server_bind()


class _MetricsRequestHandler(BaseHTTPRequestHandler):
    server_version = f"apache-exporter/{__version__}"

    def do_GET(self) -> None:  # noqa: N802
        self._handle(send_body=True)

    def do_HEAD(self) -> None:  # noqa: N802
        self._handle(send_body=False)

    def _handle(self, *, send_body: bool) -> None:
        exporter: MetricsServer = self.server.exporter_ref  # type: ignore[attr-defined]
        path = urlparse(self.path).path
        if path != exporter.telemetry_path:
            self._send(404, b"404 page not found\n", "text/plain; charset=utf-8", send_body)
            return

        try:
            body = exporter.render()
        except Exception:
            log.exception("unhandled_error", extra={"path": path, "method": self.command})
            self._send(500, b"internal error\n", "text/plain; charset=utf-8", send_body)
            return

        self._send(200, body, exporter.formatter.content_type, send_body)

    def _send(self, code: int, body: bytes, content_type: str, send_body: bool) -> None:
        self.send_response(code)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if send_body:
            self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A003
        log.debug(format, *args)


class MetricsServer:
    """Serve ``registry`` on ``telemetry_path``; every other path is a 404.

    Each request is handled on its own thread and collects synchronously.
    """

    def __init__(
        self,
        registry: MetricsRegistry,
        *,
        host: str = "",
        port: int = 9117,
        telemetry_path: str = "/metrics",
        formatter: BaseFormatter | None = None,
    ) -> None:
        self.registry = registry
        self.host = host
        self.port = port
        self.telemetry_path = telemetry_path
        self.formatter = formatter or PrometheusFormatter()
        self._http_server: _MetricsHTTPServer | None = None
        self._server_thread: threading.Thread | None = None

    @property
    def bound_port(self) -> int:
        if self._http_server is None:
            return self.port
        return int(self._http_server.server_address[1])

    def render(self) -> bytes:
        return self.formatter.format(self.registry.collect()).encode("utf-8")

    def bind(self) -> None:
        """Open the listening socket. Raises OSError if the address is unusable."""
        if self._http_server is not None:
            return
        if not self.host and socket.has_ipv6:
            try:
                self._http_server = _MetricsHTTPServerDualStack(
                    ("::", self.port), _MetricsRequestHandler, self
                )
                return
            except OSError as e:
                if e.errno not in _NO_IPV6_ERRNOS:
                    raise
                log.debug("IPv6 unavailable, listening on IPv4 only: %s", e)
        server_cls = _MetricsHTTPServerV6 if ":" in self.host else _MetricsHTTPServer
        self._http_server = server_cls((self.host, self.port), _MetricsRequestHandler, self)

    def start(self) -> None:
        """Bind and serve on a background thread."""
        if self._server_thread is not None:
            return
        self.bind()
        assert self._http_server is not None
        self._server_thread = threading.Thread(
            target=self._http_server.serve_forever, name="metrics-server", daemon=True
        )
        self._server_thread.start()

    def stop(self) -> None:
        if self._http_server is not None:
            if self._server_thread is not None:
                self._http_server.shutdown()
            self._http_server.server_close()
            self._http_server = None
        if self._server_thread is not None:
            self._server_thread.join(timeout=3.0)
            self._server_thread = None
