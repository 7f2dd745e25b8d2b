from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from ..models.output_row import OutputRow

"""Structured output writer.

Writes the OutputRow sequence as a JSON array of arrays of {"name", "value"}
objects. The NaN sentinel is written as null so the file stays strict JSON.
"""

__all__ = [
    "OutputWriteError",
    "rows_to_json_data",
    "write_structured_output",
]


class OutputWriteError(Exception):
    """Raised when the structured output cannot be written."""


def rows_to_json_data(rows: Sequence[OutputRow]) -> list[list[dict[str, object]]]:
    return [[f.to_dict() for f in row] for row in rows]


def write_structured_output(rows: Sequence[OutputRow], path: Path) -> Path:
    """Write rows to ``path`` (parent directories are created). Returns the path."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(rows_to_json_data(rows), f, ensure_ascii=False, indent=2, allow_nan=False)
            f.write("\n")
    except OSError as e:
        raise OutputWriteError(f"cannot write {path}: {e}") from e
    return path
