from __future__ import annotations

import logging
import re
import warnings
from collections import Counter
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

"""Survey CSV reader.

Thin wrapper around pandas.read_csv that yields raw records for the row shaper:
- first line is the header; every cell is read as a string (no NA conversion)
- a UTF-8 byte-order mark is stripped (utf-8-sig)
- blank lines are skipped; header names and cells are trimmed
- cells pandas could not fill (short rows) are left out of the record
- a row longer than the header is a parse error, never an implicit index
"""

__all__ = [
    "CsvReadError",
    "SurveyData",
    "read_survey_csv",
]

logger = logging.getLogger(__name__)

# pandas renames repeated headers "Q3", "Q3" to "Q3", "Q3.1"
_MANGLED_DUPLICATE = re.compile(r"^(.*)\.(\d+)$")


class CsvReadError(Exception):
    """Raised when the CSV file cannot be opened or parsed."""


@dataclass
class SurveyData:
    path: Path
    columns: list[str]
    records: list[dict[str, str]]  # header -> trimmed raw string


def _warn_duplicate_headers(raw_columns: list[str], columns: list[str], path: Path) -> None:
    for name, count in Counter(columns).items():
        if count > 1:
            logger.warning(f"duplicate header '{name}' in {path} after trimming; the last such column is read")
    present = set(raw_columns)
    for raw in raw_columns:
        m = _MANGLED_DUPLICATE.match(raw)
        if m and m.group(1) in present:
            logger.warning(f"header '{raw}' in {path} looks like a renamed duplicate of '{m.group(1)}'")


def read_survey_csv(path: Path, skip_rows: int = 0) -> SurveyData:
    """Read a survey export CSV.

    Parameters
    ----------
    path: CSV file path
    skip_rows: number of data rows directly below the header to discard
        (Qualtrics exports carry a question-text row and an import-id row)
    """
    try:
        with warnings.catch_warnings():
            # data loss on over-long rows is reported as a ParserWarning
            warnings.simplefilter("error", pd.errors.ParserWarning)
            df = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                encoding="utf-8-sig",
                skip_blank_lines=True,
                index_col=False,
            )
    except FileNotFoundError as e:
        raise CsvReadError(f"file not found: {path}") from e
    except pd.errors.EmptyDataError as e:
        raise CsvReadError(f"no header row in {path}") from e
    except (pd.errors.ParserError, pd.errors.ParserWarning) as e:
        raise CsvReadError(f"CSV parse error in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CsvReadError(f"cannot decode {path} as UTF-8: {e}") from e
    except OSError as e:
        raise CsvReadError(f"cannot read {path}: {e}") from e

    if skip_rows:
        df = df.iloc[skip_rows:]
    raw_columns = [str(c) for c in df.columns]
    columns = [c.strip() for c in raw_columns]
    _warn_duplicate_headers(raw_columns, columns, Path(path))
    records: list[dict[str, str]] = []
    for raw in df.itertuples(index=False, name=None):
        record: dict[str, str] = {}
        for col, val in zip(columns, raw, strict=False):
            # short rows are padded with NaN regardless of na_filter
            if isinstance(val, str):
                record[col] = val.strip()
        records.append(record)
    return SurveyData(path=Path(path), columns=columns, records=records)
