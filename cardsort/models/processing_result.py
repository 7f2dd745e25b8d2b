from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result model for one survey run.

Aggregates the counters reported on the SUMMARY line.
"""


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of shaping one survey CSV."""
    survey: str  # RunConfig name
    total_records: int  # records handed over by the CSV reader
    kept_rows: int  # materialized OutputRows
    dropped_records: int  # records that produced no field at all
    missing_cells: int  # configured column absent from a record
    non_numeric_cells: int  # number cells coerced to the NaN sentinel
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float  # end - start
