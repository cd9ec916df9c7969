"""Metric collectors."""

from __future__ import annotations

from .apache import ApacheCollector, CollectorState
from .base import BaseCollector
from .process import ProcessCollector

__all__ = [
    "ApacheCollector",
    "BaseCollector",
    "CollectorState",
    "ProcessCollector",
]
