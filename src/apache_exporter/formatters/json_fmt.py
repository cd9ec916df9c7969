"""JSON formatter."""

from __future__ import annotations

import json

from ..metrics import MetricSnapshot
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Format snapshot as JSON."""

    content_type = "application/json; charset=utf-8"

    def format(self, snapshot: MetricSnapshot) -> str:
        return json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
