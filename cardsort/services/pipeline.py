from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..csvfile.reader import CsvReadError, read_survey_csv
from ..logging.diagnostic_log import DiagnosticLogBuffer
from ..models.cell_issue import CellIssue, IssueKind
from ..models.config_models import RunConfig
from ..models.diagnostic_record import DiagnosticRecord
from ..models.output_row import OutputRow
from ..models.processing_result import ProcessingResult
from .output_writer import OutputWriteError, write_structured_output
from .progress import ProgressTracker
from .row_shaper import RowIdCounter, shape_row

logger = logging.getLogger(__name__)

"""Pipeline driver for one survey run.

Reads the CSV through the reader collaborator, shapes every record with one
RowIdCounter scoped to the run, writes the structured output and returns the
kept rows together with the run metrics. Every fatal condition surfaces as
PipelineError; nothing is retried.
"""

__all__ = [
    "PipelineError",
    "PipelineRun",
    "run_pipeline",
]


class PipelineError(Exception):
    """Fatal error that aborts a run."""
    pass


@dataclass(frozen=True)
class PipelineRun:
    rows: list[OutputRow]
    result: ProcessingResult
    issues: list[CellIssue]


def resolve_input(path: str | Path) -> Path:
    """Resolve the input path, failing if it is not a readable file."""
    p = Path(path)
    if not p.exists():
        raise PipelineError(f"input file not found: {p}")
    if not p.is_file():
        raise PipelineError(f"input path is not a file: {p}")
    return p.resolve()


def run_pipeline(config: RunConfig, *, diagnostics: DiagnosticLogBuffer | None = None) -> PipelineRun:
    """Run one survey end to end.

    Args:
        config: the survey to run
        diagnostics: optional buffer receiving one DiagnosticRecord per CellIssue

    Returns:
        PipelineRun with the kept rows, metrics and the collected cell issues

    Raises:
        PipelineError: input missing/unreadable, CSV structurally broken, output not writable
    """
    start_time = datetime.now(UTC)
    input_path = resolve_input(config.input_path)
    logger.debug(f"realpath: {input_path}")

    try:
        survey = read_survey_csv(input_path, skip_rows=config.skip_rows)
    except CsvReadError as e:
        raise PipelineError(str(e)) from e
    logger.info(f"read {len(survey.records)} records from {input_path.name}")

    absent = [s.source_column for s in config.column_shapes if s.source_column not in survey.columns]
    if absent:
        logger.info(f"configured columns not in header (treated as empty): {absent}")

    counter = RowIdCounter()
    rows: list[OutputRow] = []
    issues: list[CellIssue] = []
    dropped = 0

    with ProgressTracker(len(survey.records), description=config.name) as progress:
        for index, record in enumerate(survey.records):
            row = shape_row(
                record,
                config.column_shapes,
                config.ignore_list,
                counter.value,
                issues=issues,
                record_index=index,
            )
            if row is None:
                dropped += 1
            else:
                rows.append(row)
                counter.increment()
            progress.advance()
        progress.set_postfix(kept=len(rows), dropped=dropped)

    try:
        out = write_structured_output(rows, Path(config.output_path))
    except OutputWriteError as e:
        raise PipelineError(str(e)) from e
    logger.info(f"wrote {len(rows)} rows to {out}")

    if diagnostics is not None:
        for issue in issues:
            diagnostics.append(DiagnosticRecord.from_issue(input_path.name, issue))

    end_time = datetime.now(UTC)
    result = ProcessingResult(
        survey=config.name,
        total_records=len(survey.records),
        kept_rows=len(rows),
        dropped_records=dropped,
        missing_cells=sum(1 for i in issues if i.kind is IssueKind.MISSING_COLUMN),
        non_numeric_cells=sum(1 for i in issues if i.kind is IssueKind.NON_NUMERIC),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
    return PipelineRun(rows=rows, result=result, issues=issues)
