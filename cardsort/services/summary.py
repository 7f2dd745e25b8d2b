from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering service.

Format:
SUMMARY survey={name} records={n} kept={n} dropped={n} missing_cells={n}
non_numeric={n} elapsed_sec={x}
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip('0').rstrip('.')
    return str(round(seconds, 3))


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for one run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2023, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     survey="exit", total_records=3, kept_rows=2, dropped_records=1,
        ...     missing_cells=0, non_numeric_cells=0, start_time=t, end_time=t,
        ...     elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY survey=exit records=3 kept=2 dropped=1 missing_cells=0 non_numeric=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY survey={result.survey} "
        f"records={result.total_records} "
        f"kept={result.kept_rows} "
        f"dropped={result.dropped_records} "
        f"missing_cells={result.missing_cells} "
        f"non_numeric={result.non_numeric_cells} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
