from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, TypeAlias

"""OutputField / OutputRow models.

An OutputRow is an ordered list of OutputField. When a row exists its first
field is always the synthetic identity field (ROW_ID_FIELD), followed by the
shape-derived fields in configuration order.
"""

__all__ = [
    "ROW_ID_FIELD",
    "OutputField",
    "OutputRow",
    "row_id_of",
]

ROW_ID_FIELD = "rowId"

FieldValue: TypeAlias = int | float | str


@dataclass(frozen=True)
class OutputField:
    """One surviving, coerced, named value."""
    name: str
    value: FieldValue

    @property
    def is_identity(self) -> bool:
        return self.name == ROW_ID_FIELD

    def to_dict(self) -> dict[str, Any]:
        """Serializable form. Non-finite numbers (the NaN sentinel) become None."""
        value: Any = self.value
        if isinstance(value, float) and not math.isfinite(value):
            value = None
        return {"name": self.name, "value": value}


OutputRow: TypeAlias = list[OutputField]


def row_id_of(row: OutputRow) -> int:
    """Return the identity value of a materialized row."""
    if not row or not row[0].is_identity:
        raise ValueError("row has no leading identity field")
    return int(row[0].value)
