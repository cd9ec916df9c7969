from __future__ import annotations

import os
from dataclasses import dataclass, field


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw not in {"0", "false", "False"}


@dataclass(frozen=True, slots=True)
class Settings:
    listen_address: str = field(
        default_factory=lambda: _get_str("APACHE_EXPORTER_LISTEN_ADDRESS", ":9117")
    )
    telemetry_path: str = field(
        default_factory=lambda: _get_str("APACHE_EXPORTER_TELEMETRY_PATH", "/metrics")
    )
    scrape_uri: str = field(
        default_factory=lambda: _get_str(
            "APACHE_EXPORTER_SCRAPE_URI", "http://localhost/server-status/?auto"
        )
    )
    insecure: bool = field(default_factory=lambda: _get_bool("APACHE_EXPORTER_INSECURE", False))

    # 0 means no deadline on the upstream fetch
    timeout_seconds: float = field(
        default_factory=lambda: _get_float("APACHE_EXPORTER_TIMEOUT", 0.0)
    )
    process_metrics: bool = field(
        default_factory=lambda: _get_bool("APACHE_EXPORTER_PROCESS_METRICS", True)
    )
    log_level: str = field(default_factory=lambda: _get_str("LOG_LEVEL", "INFO"))


settings = Settings()


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts.

    An empty host (``:9117``) means all interfaces. IPv6 hosts must be
    bracketed (``[::1]:9117``).
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 host must be bracketed in address {address!r}")
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"invalid port in address {address!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range in address {address!r}")
    return host, port
