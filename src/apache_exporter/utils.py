"""Shared utility functions."""

from __future__ import annotations

import os
import sys


def output_text(data: str, output_file: str | None = None) -> None:
    """Write *data* to *output_file* (append) or stdout."""
    if not data.endswith("\n"):
        data += "\n"
    if output_file:
        mode = "a" if os.path.exists(output_file) else "w"
        with open(output_file, mode) as f:
            f.write(data)
    else:
        sys.stdout.write(data)
        sys.stdout.flush()
