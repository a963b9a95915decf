from __future__ import annotations

import zipfile
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reader and grid accessor.

The parsers only need read-only cell lookup by (sheet, column, row). Sheets are
read with pandas without a header row, so that DataFrame positions are the
zero-based grid coordinates of the sheet.

Cell normalization:
- NaN / None / empty string -> None (absent)
- numpy scalars -> python scalars
- strings are returned unchanged (no strip: sentinel matching is exact)
"""

__all__ = [
    "CellValue",
    "WorkbookReadError",
    "WorkbookGrid",
    "read_excel_file",
]

CellValue = str | int | float | None


class WorkbookReadError(Exception):
    """Raised when a workbook file cannot be opened or parsed."""


def read_excel_file(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read a workbook returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: workbook path (.xlsx / .xlsm)
    target_sheets: restrict to these sheet names (None = all sheets)
    """
    wanted = set(target_sheets) if target_sheets is not None else None
    dfs: dict[str, pd.DataFrame] = {}
    try:
        xls = pd.ExcelFile(path)
    except (OSError, ValueError, zipfile.BadZipFile, ImportError) as e:
        # ImportError: pandas has no engine installed for this format (xlrd for .xls)
        raise WorkbookReadError(f"cannot open workbook '{path}': {e}") from e
    with xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            # ヘッダなしで生読み / 'NA' 等の文字列は NaN に変換しない
            df = xls.parse(name, header=None, keep_default_na=False, na_values=[""])
            dfs[str(name)] = df
    return dfs


def _normalize(value: Any) -> CellValue:
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, str):
        return value if value != "" else None
    if hasattr(value, "item"):
        # numpy scalar
        value = value.item()
    if isinstance(value, float) and pd.isna(value):
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    return str(value)


class WorkbookGrid:
    """Read-only cell access to the sheets of one workbook.

    Out-of-range coordinates return None, never raise.
    """

    def __init__(self, sheets: Mapping[str, pd.DataFrame], file_name: str = "") -> None:
        self._sheets = dict(sheets)
        self.file_name = file_name

    @classmethod
    def from_file(cls, path: Path, target_sheets: Iterable[str] | None = None) -> WorkbookGrid:
        return cls(read_excel_file(path, target_sheets), file_name=path.name)

    @classmethod
    def from_rows(cls, sheets: Mapping[str, Sequence[Sequence[Any]]], file_name: str = "") -> WorkbookGrid:
        """Build a grid from plain row lists (ragged rows are padded)."""
        frames = {name: pd.DataFrame([list(r) for r in rows]) for name, rows in sheets.items()}
        return cls(frames, file_name=file_name)

    @property
    def sheet_names(self) -> list[str]:
        return list(self._sheets.keys())

    def cell_value(self, sheet_name: str, column: int, row: int) -> CellValue:
        df = self._sheets.get(sheet_name)
        if df is None or row < 0 or column < 0:
            return None
        n_rows, n_cols = df.shape
        if row >= n_rows or column >= n_cols:
            return None
        return _normalize(df.iat[row, column])

    def cell_value_string(self, sheet_name: str, column: int, row: int) -> str | None:
        """Cell value as string; integral floats lose the '.0' (1.0 -> '1')."""
        value = self.cell_value(sheet_name, column, row)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
