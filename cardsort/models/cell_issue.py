from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""CellIssue model: recoverable per-cell conditions found while shaping rows.

Only conditions worth a diagnostic are represented here. Empty and
ignore-listed values are deliberate exclusions and never produce a CellIssue.
"""

__all__ = [
    "IssueKind",
    "CellIssue",
]


class IssueKind(Enum):
    MISSING_COLUMN = "MISSING_COLUMN"  # configured column absent from the record
    NON_NUMERIC = "NON_NUMERIC"  # number column got text, value became NaN


@dataclass(frozen=True)
class CellIssue:
    record_index: int  # 0-based input record index (not output row). -1 if unknown
    column: str
    kind: IssueKind
    raw_value: str | None = None
