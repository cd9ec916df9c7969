"""
apache_exporter

Prometheus exporter for the Apache ``mod_status`` page.

Each scrape of the metrics endpoint fetches ``/server-status/?auto`` from the
configured Apache server, parses it and republishes the values in the
Prometheus text exposition format.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
