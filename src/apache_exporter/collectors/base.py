"""Base collector interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..metrics import MetricFamily


class BaseCollector(ABC):
    """Abstract base class for all metric collectors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Collector name, unique within a registry."""
        ...

    @abstractmethod
    def collect(self) -> list[MetricFamily]:
        """Collect and return the current metric families."""
        ...
