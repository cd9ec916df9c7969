"""Metric data model shared by collectors, the registry and formatters."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

COUNTER = "counter"
GAUGE = "gauge"


@dataclass(frozen=True, slots=True)
class Sample:
    name: str
    value: float
    labels: tuple[tuple[str, str], ...] = ()

    @property
    def label_dict(self) -> dict[str, str]:
        return dict(self.labels)


@dataclass(slots=True)
class MetricFamily:
    """One named metric with its help text, type and samples."""

    name: str
    documentation: str
    type: str
    samples: list[Sample] = field(default_factory=list)

    def add_sample(self, value: float, labels: Mapping[str, str] | None = None) -> None:
        pairs = tuple(labels.items()) if labels else ()
        self.samples.append(Sample(name=self.name, value=float(value), labels=pairs))


def counter(name: str, documentation: str, value: float | None = None) -> MetricFamily:
    family = MetricFamily(name=name, documentation=documentation, type=COUNTER)
    if value is not None:
        family.add_sample(value)
    return family


def gauge(name: str, documentation: str, value: float | None = None) -> MetricFamily:
    family = MetricFamily(name=name, documentation=documentation, type=GAUGE)
    if value is not None:
        family.add_sample(value)
    return family


@dataclass(slots=True)
class MetricSnapshot:
    """Ordered families produced by a single collection."""

    families: list[MetricFamily] = field(default_factory=list)

    def __iter__(self) -> Iterator[MetricFamily]:
        return iter(self.families)

    def __len__(self) -> int:
        return len(self.families)

    def names(self) -> list[str]:
        return [f.name for f in self.families]

    def get(self, name: str) -> MetricFamily | None:
        for family in self.families:
            if family.name == name:
                return family
        return None

    def value(self, name: str, **labels: str) -> float | None:
        """Return the value of the sample matching *name* and *labels* exactly."""
        family = self.get(name)
        if family is None:
            return None
        for sample in family.samples:
            if sample.label_dict == labels:
                return sample.value
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "metrics": [
                {
                    "name": f.name,
                    "help": f.documentation,
                    "type": f.type,
                    "samples": [
                        {"name": s.name, "labels": s.label_dict, "value": s.value}
                        for s in f.samples
                    ],
                }
                for f in self.families
            ]
        }
