"""Domain models for the survey card-sort tool.

This package contains the domain model classes shared by the config loader,
the row shaper, the pipeline driver and the writers.
"""

from .cell_issue import CellIssue, IssueKind
from .config_models import ColumnShape, RunConfig, ValueKind, normalize_ignore_list
from .diagnostic_record import DiagnosticRecord
from .output_row import ROW_ID_FIELD, OutputField, OutputRow, row_id_of
from .processing_result import ProcessingResult

__all__ = [
    # Configuration models
    "ColumnShape",
    "RunConfig",
    "ValueKind",
    "normalize_ignore_list",
    # Row models
    "ROW_ID_FIELD",
    "OutputField",
    "OutputRow",
    "row_id_of",
    # Diagnostics / results
    "CellIssue",
    "IssueKind",
    "DiagnosticRecord",
    "ProcessingResult",
]
