from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping, Sequence

from ..models.cell_issue import CellIssue, IssueKind
from ..models.config_models import ColumnShape, ValueKind
from ..models.output_row import ROW_ID_FIELD, FieldValue, OutputField, OutputRow

"""Row shaping: turn one parsed CSV record into zero or one OutputRow.

Per configured column, in configuration order:
1. Missing from the record -> skipped (DEBUG diagnostic only, never raised)
2. Newlines -> single spaces, then surrounding whitespace trimmed
3. Empty, or equal (case-insensitively, whole value) to an ignore-list entry -> dropped
4. Coerced according to the column's ValueKind and appended

A row that ends up with no fields is not materialized. Row ids are handed in by
the caller; the caller advances its counter only when a row is returned.
"""

__all__ = [
    "NOT_A_NUMBER",
    "RowIdCounter",
    "coerce_number",
    "normalize_cell",
    "shape_records",
    "shape_row",
]

logger = logging.getLogger(__name__)

# Sentinel for number cells holding non-numeric text
NOT_A_NUMBER = math.nan

_NEWLINES = re.compile(r"\r\n|\r|\n")


class RowIdCounter:
    """Per-run row identity counter. Owned by the driver, one increment per kept row."""

    def __init__(self, start: int = 0) -> None:
        self._value = start

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        self._value += 1
        return self._value


def normalize_cell(raw: str) -> str:
    """Collapse every embedded newline to one space and trim the result."""
    return _NEWLINES.sub(" ", raw).strip()


def coerce_number(text: str) -> int | float:
    """Parse a trimmed cell as a number.

    Integers stay ``int``; floats with an integral value become ``int`` ("12.0" -> 12).
    Digit grouping ("1_000", "1,000") and non-ASCII digits are not numbers here.
    Anything unparseable returns NOT_A_NUMBER instead of raising.
    """
    if "_" in text or not text.isascii():
        return NOT_A_NUMBER
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return NOT_A_NUMBER
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def shape_row(
    record: Mapping[str, str],
    shapes: Sequence[ColumnShape],
    ignore_list: Iterable[str],
    next_id: int,
    issues: list[CellIssue] | None = None,
    record_index: int = -1,
) -> OutputRow | None:
    """Shape one record. Returns None when no configured value survives.

    Args:
        record: header -> raw string mapping produced by the CSV reader
        shapes: columns of interest in output order
        ignore_list: boilerplate answers to drop (matched case-insensitively)
        next_id: identity value for the row if one is materialized
        issues: optional collector for recoverable per-cell diagnostics
        record_index: input record position, only used to label diagnostics
    """
    ignored = {entry.strip().casefold() for entry in ignore_list}
    fields: list[OutputField] = []

    for shape in shapes:
        if shape.source_column not in record:
            logger.debug(f"column '{shape.source_column}' missing from record {record_index}")
            if issues is not None:
                issues.append(CellIssue(record_index, shape.source_column, IssueKind.MISSING_COLUMN))
            continue

        text = normalize_cell(record[shape.source_column])
        if not text or text.casefold() in ignored:
            continue

        value: FieldValue
        if shape.value_kind is ValueKind.NUMBER:
            value = coerce_number(text)
            if isinstance(value, float) and math.isnan(value):
                logger.warning(
                    f"column '{shape.source_column}' record {record_index}: non-numeric value {text!r} -> NaN"
                )
                if issues is not None:
                    issues.append(CellIssue(record_index, shape.source_column, IssueKind.NON_NUMERIC, text))
        else:
            value = text
        fields.append(OutputField(shape.output_name, value))

    if not fields:
        return None
    return [OutputField(ROW_ID_FIELD, next_id), *fields]


def shape_records(
    records: Iterable[Mapping[str, str]],
    shapes: Sequence[ColumnShape],
    ignore_list: Iterable[str],
    issues: list[CellIssue] | None = None,
) -> list[OutputRow]:
    """Shape a whole record sequence with one fresh RowIdCounter."""
    ignored = frozenset(ignore_list)
    counter = RowIdCounter()
    rows: list[OutputRow] = []
    for index, record in enumerate(records):
        row = shape_row(record, shapes, ignored, counter.value, issues=issues, record_index=index)
        if row is not None:
            rows.append(row)
            counter.increment()
    return rows
