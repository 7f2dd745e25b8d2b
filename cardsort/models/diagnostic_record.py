from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .cell_issue import CellIssue

"""DiagnosticRecord model for the JSON Lines diagnostics log.

A DiagnosticRecord is the persisted form of a CellIssue. The key set is fixed;
``to_json_line`` never adds keys beyond the dataclass fields.
"""

__all__ = [
    "DiagnosticRecord",
]


@dataclass(frozen=True)
class DiagnosticRecord:
    """Structured diagnostic for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV filename being processed
        record: 0-based input record index. -1 when the record is unknown
        column: Source column the diagnostic refers to
        issue_type: Issue classification in UPPER_SNAKE_CASE format
        raw_value: Offending raw cell, or None when the cell does not exist
    """
    timestamp: str
    file: str
    record: int
    column: str
    issue_type: str
    raw_value: str | None

    @staticmethod
    def create(file: str, record: int, column: str, issue_type: str, raw_value: str | None = None) -> DiagnosticRecord:
        """Create a new DiagnosticRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return DiagnosticRecord(
            timestamp=ts,
            file=file,
            record=record,
            column=column,
            issue_type=issue_type,
            raw_value=raw_value,
        )

    @staticmethod
    def from_issue(file: str, issue: CellIssue) -> DiagnosticRecord:
        return DiagnosticRecord.create(
            file=file,
            record=issue.record_index,
            column=issue.column,
            issue_type=issue.kind.value,
            raw_value=issue.raw_value,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
