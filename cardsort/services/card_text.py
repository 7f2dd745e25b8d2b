from __future__ import annotations

import math
from collections.abc import Iterator, Sequence

from ..models.output_row import OutputField, OutputRow, row_id_of

"""Card text rendering for manual card-sort exercises.

Every non-identity field of every row becomes one card:

    <value> (r<rowId>_<fieldName>)

followed by two blank lines, so cards can be pasted one by one into sorting tools.
"""

__all__ = [
    "format_card_value",
    "render_card_lines",
    "render_card_text",
]

CARD_SEPARATOR = "\n\n\n"


def format_card_value(value: object) -> str:
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    return str(value)


def _card(row_id: int, field: OutputField) -> str:
    return f"{format_card_value(field.value)} (r{row_id}_{field.name})"


def render_card_lines(rows: Sequence[OutputRow]) -> Iterator[str]:
    """Yield one card line per non-identity field, in row then field order."""
    for row in rows:
        row_id = row_id_of(row)
        for field in row:
            if field.is_identity:
                continue
            yield _card(row_id, field)


def render_card_text(rows: Sequence[OutputRow]) -> str:
    return "".join(line + CARD_SEPARATOR for line in render_card_lines(rows))
