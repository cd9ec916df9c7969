"""Prometheus text exposition formatter (format version 0.0.4)."""

from __future__ import annotations

import math

from ..metrics import MetricSnapshot, Sample
from .base import BaseFormatter


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label_value(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))


def _format_sample(sample: Sample) -> str:
    if not sample.labels:
        return f"{sample.name} {format_value(sample.value)}"
    labels = ",".join(f'{k}="{_escape_label_value(v)}"' for k, v in sample.labels)
    return f"{sample.name}{{{labels}}} {format_value(sample.value)}"


class PrometheusFormatter(BaseFormatter):
    """Format snapshot as Prometheus metrics."""

    content_type = "text/plain; version=0.0.4; charset=utf-8"

    def format(self, snapshot: MetricSnapshot) -> str:
        lines: list[str] = []

        for family in snapshot:
            lines.append(f"# HELP {family.name} {_escape_help(family.documentation)}")
            lines.append(f"# TYPE {family.name} {family.type}")
            lines.extend(_format_sample(s) for s in family.samples)

        if not lines:
            return ""
        return "\n".join(lines) + "\n"
