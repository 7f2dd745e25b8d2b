from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .output_row import ROW_ID_FIELD

"""Config dataclasses for the survey card-sort tool.

These are the typed domain models built by the YAML loader in
cardsort/config/loader.py. They are immutable and shared read-only across
every row shaping call of a run.
"""

__all__ = [
    "ValueKind",
    "ColumnShape",
    "RunConfig",
    "normalize_ignore_list",
]


class ValueKind(Enum):
    """How a raw cell is coerced before it lands in an output row."""
    NUMBER = "number"
    TEXT = "text"

    @classmethod
    def parse(cls, raw: str) -> ValueKind:
        """Parse a config value. ``string`` is accepted as an alias of ``text``."""
        key = raw.strip().lower()
        if key == "string":
            return cls.TEXT
        return cls(key)


@dataclass(frozen=True)
class ColumnShape:
    """One column of interest: where to read it, what to call it, how to type it.

    ``source_column`` must match the CSV header exactly (case-sensitive).
    """
    source_column: str
    output_name: str
    value_kind: ValueKind = ValueKind.TEXT

    def __post_init__(self) -> None:
        if not self.output_name:
            raise ValueError(f"column '{self.source_column}' has an empty output name")
        if self.output_name == ROW_ID_FIELD:
            raise ValueError(f"column '{self.source_column}' cannot use the reserved output name '{ROW_ID_FIELD}'")


def normalize_ignore_list(entries: Iterable[str]) -> frozenset[str]:
    """Trim and case-fold stoplist entries so lookups are a plain set membership."""
    return frozenset(e.strip().casefold() for e in entries if e.strip())


@dataclass(frozen=True)
class RunConfig:
    """Complete description of one named survey run."""
    name: str
    input_path: str
    output_path: str
    column_shapes: tuple[ColumnShape, ...]
    ignore_list: frozenset[str] = field(default_factory=frozenset)  # stored case-folded
    skip_rows: int = 0  # data rows right after the header to discard (Qualtrics meta rows)

    def __post_init__(self) -> None:
        object.__setattr__(self, "column_shapes", tuple(self.column_shapes))
        object.__setattr__(self, "ignore_list", normalize_ignore_list(self.ignore_list))
        if self.skip_rows < 0:
            raise ValueError(f"skip_rows must be >= 0 (got {self.skip_rows})")
