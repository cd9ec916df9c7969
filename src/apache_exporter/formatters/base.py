"""Base formatter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..metrics import MetricSnapshot


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    content_type = "text/plain; charset=utf-8"

    @abstractmethod
    def format(self, snapshot: MetricSnapshot) -> str:
        """Format snapshot data to string."""
        ...
