from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

"""Tabular file decoding.

Turns an upload (.xlsx/.xls first sheet, or .csv) into raw rows: a list of
dicts keyed by the header string exactly as it appears in row 1. Each row
carries its sheet row number. Rows where every cell is empty are skipped;
empty cells become None.

Any failure to decode is a file-level failure and raises TabularDecodeError.
"""

__all__ = [
    "TabularDecodeError",
    "RawRow",
    "SUPPORTED_SUFFIXES",
    "read_tabular_file",
    "dataframe_to_rows",
]

EXCEL_SUFFIXES = {".xlsx", ".xls", ".xlsm"}
CSV_SUFFIXES = {".csv"}
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES | CSV_SUFFIXES


class TabularDecodeError(Exception):
    """Raised when a file cannot be decoded into rows at all."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to decode {path.name}: {reason}")
        self.path = path
        self.reason = reason


def _na_options(keep_na_strings: Iterable[str] | None) -> dict[str, Any]:
    # pandas._libs.parsers.STR_NA_VALUES holds the default NA string set
    if not keep_na_strings:
        return {"keep_default_na": True, "na_values": None}
    import pandas._libs.parsers as parsers

    custom_na = parsers.STR_NA_VALUES.copy() - set(keep_na_strings)
    return {"keep_default_na": False, "na_values": list(custom_na)}


def read_tabular_file(path: Path, keep_na_strings: Iterable[str] | None = None) -> list[RawRow]:
    """Decode the first sheet (Excel) or the whole file (CSV) into raw rows.

    Parameters
    ----------
    path: file to decode
    keep_na_strings: strings pandas must keep as text instead of NaN (e.g. ['NA'])
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if not path.exists():
        raise TabularDecodeError(path, "file not found")
    if suffix not in SUPPORTED_SUFFIXES:
        raise TabularDecodeError(path, f"unsupported file type '{suffix}' (expected one of {sorted(SUPPORTED_SUFFIXES)})")

    na = _na_options(keep_na_strings)
    try:
        if suffix in CSV_SUFFIXES:
            # blank lines still count as sheet rows
            df = pd.read_csv(path, skip_blank_lines=False, **na)
        else:
            xls = pd.ExcelFile(path)
            if not xls.sheet_names:
                raise TabularDecodeError(path, "workbook has no sheets")
            df = xls.parse(xls.sheet_names[0], **na)
    except TabularDecodeError:
        raise
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        raise TabularDecodeError(path, str(e) or type(e).__name__) from e

    return dataframe_to_rows(df)


def _to_python(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


class RawRow(dict):
    """One decoded row; `row_number` is its spreadsheet row (header is row 1)."""

    __slots__ = ("row_number",)

    def __init__(self, values: dict[str, Any], row_number: int) -> None:
        super().__init__(values)
        self.row_number = row_number


def dataframe_to_rows(df: pd.DataFrame) -> list[RawRow]:
    """Convert a header-applied DataFrame into raw rows.

    Blank rows are dropped but still counted, so each row keeps the number
    it has in the sheet.
    """
    columns = [str(c) for c in df.columns]
    rows: list[RawRow] = []
    for position, (_, raw) in enumerate(df.iterrows()):
        if raw.isna().all():
            continue
        values = {
            col: None if pd.isna(val) else _to_python(val)
            for col, val in zip(columns, raw.tolist(), strict=False)
        }
        rows.append(RawRow(values, row_number=position + 2))
    return rows
