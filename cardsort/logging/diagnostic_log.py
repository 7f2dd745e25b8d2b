from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic_record import DiagnosticRecord

"""Diagnostics log buffering.

- JSON Lines, fixed schema (DiagnosticRecord fields only)
- one `logs/diagnostics-YYYYMMDD-HHMMSS.log` (UTC) per run, created on first flush
- records are buffered in memory and written in one go
"""

__all__ = [
    "DiagnosticRecord",
    "DiagnosticLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DiagnosticLogBuffer:
    """In-memory buffer for diagnostic records. Flush appends JSON Lines.

    Serial use only; the file path is fixed on first access.
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[DiagnosticRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"diagnostics-{stamp}.log"
        return self._file_path

    def append(self, record: DiagnosticRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records. Returns the file path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
