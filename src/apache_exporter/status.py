"""Parsing of the Apache ``mod_status`` page (``/server-status/?auto``).

The page is a loose mix of ``Key: Value`` lines and, depending on the server
configuration, HTML table rows such as the per-child ``Sum`` row. Everything
here is pure: text in, :class:`ParsedFields` out.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from .errors import ParseError

SUM_ROW_MARKER = "<td>Sum</td>"
SUM_ROW_CELLS = 8
SUM_ROW_BUSY_COLUMN = 3
SUM_ROW_IDLE_COLUMN = 4

_CELL_START = "<td>"
_CELL_END = "</td>"

# Decimal, exponent and hex (mandatory p exponent) forms plus inf/infinity/nan.
# ASCII digits only; no digit-group underscores.
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE | re.ASCII,
)
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)p[+-]?[0-9]+",
    re.IGNORECASE | re.ASCII,
)


@dataclass(slots=True)
class ParsedFields:
    accesses_total: float | None = None
    kbytes_total: float | None = None
    uptime_seconds: float | None = None
    workers: dict[str, float] = field(default_factory=dict)
    threads: dict[str, float] = field(default_factory=dict)


def split_kv(line: str) -> tuple[str, str]:
    """Split a ``Key: Value`` line on its first colon.

    Without a colon the whole line is the key and the value is empty.
    """
    if not line:
        return "", ""

    key, sep, value = line.partition(":")
    if not sep:
        return line, ""

    return key.strip(), value.strip()


def split_row(line: str) -> list[str]:
    """Return the trimmed contents of each complete ``<td>...</td>`` cell."""
    cells: list[str] = []
    if not line:
        return cells

    for chunk in line.split(_CELL_START):
        parts = chunk.split(_CELL_END)
        if len(parts) == 2:
            cells.append(parts[0].strip())
    return cells


def parse_float(key: str, raw: str) -> float:
    """Parse ``raw`` as a float; malformed or out-of-range text is a ParseError."""
    if _HEX_FLOAT_RE.fullmatch(raw):
        try:
            return float.fromhex(raw)
        except OverflowError:
            raise ParseError(key=key, value=raw) from None

    if not _FLOAT_RE.fullmatch(raw):
        raise ParseError(key=key, value=raw)

    value = float(raw)
    # Overflow to infinity only counts when the text spells it out
    if math.isinf(value) and not raw.lstrip("+-").lower().startswith("inf"):
        raise ParseError(key=key, value=raw)
    return value


def _apply_sum_row(fields: ParsedFields, line: str) -> None:
    cells = split_row(line)
    if len(cells) != SUM_ROW_CELLS:
        return
    fields.threads["busy"] = parse_float(
        f"Sum[{SUM_ROW_BUSY_COLUMN}]", cells[SUM_ROW_BUSY_COLUMN]
    )
    fields.threads["idle"] = parse_float(
        f"Sum[{SUM_ROW_IDLE_COLUMN}]", cells[SUM_ROW_IDLE_COLUMN]
    )


def _apply_kv(fields: ParsedFields, key: str, value: str) -> None:
    if key == "Total Accesses":
        fields.accesses_total = parse_float(key, value)
    elif key == "Total kBytes":
        fields.kbytes_total = parse_float(key, value)
    elif key == "Uptime":
        fields.uptime_seconds = parse_float(key, value)
    elif key == "BusyWorkers":
        fields.workers["busy"] = parse_float(key, value)
    elif key == "IdleWorkers":
        fields.workers["idle"] = parse_float(key, value)


def parse_status(text: str) -> ParsedFields:
    """Parse a whole status document.

    Raises:
        ParseError: a recognized field (or a Sum row column) is not a float.
            Nothing parsed so far is returned in that case.
    """
    fields = ParsedFields()
    for line in text.split("\n"):
        if SUM_ROW_MARKER in line:
            _apply_sum_row(fields, line)
            continue

        key, value = split_kv(line)
        _apply_kv(fields, key, value)
    return fields
