from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from xlsx_tables.excel.reader import WorkbookGrid, WorkbookReadError, read_excel_file


def test_cell_value_out_of_range_is_none(make_grid):
    grid = make_grid({"S": [["a", "b"], ["c"]]})
    assert grid.cell_value("S", 0, 0) == "a"
    assert grid.cell_value("S", 1, 1) is None  # padded
    assert grid.cell_value("S", 5, 0) is None
    assert grid.cell_value("S", 0, 9) is None
    assert grid.cell_value("S", -1, 0) is None
    assert grid.cell_value("Missing", 0, 0) is None


def test_cell_value_string_conversions(make_grid):
    grid = make_grid({"S": [[1.0, 2.5, 3, True, "", "text"]]})
    assert grid.cell_value_string("S", 0, 0) == "1"
    assert grid.cell_value_string("S", 1, 0) == "2.5"
    assert grid.cell_value_string("S", 2, 0) == "3"
    assert grid.cell_value_string("S", 3, 0) == "true"
    assert grid.cell_value_string("S", 4, 0) is None
    assert grid.cell_value_string("S", 5, 0) == "text"


def test_sheet_names_keep_workbook_order(make_grid):
    grid = make_grid({"B": [["x"]], "A": [["y"]]}, file_name="book.xlsx")
    assert grid.sheet_names == ["B", "A"]
    assert grid.file_name == "book.xlsx"


def test_read_excel_file_raw_cells(temp_workdir: Path):
    path = temp_workdir / "data" / "book.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([["<END>", None, "NA"], [None, 5, "x"]]).to_excel(writer, sheet_name="S", header=False, index=False)
        pd.DataFrame([["other"]]).to_excel(writer, sheet_name="T", header=False, index=False)

    grid = WorkbookGrid.from_file(path)
    assert grid.sheet_names == ["S", "T"]
    assert grid.file_name == "book.xlsx"
    # no header row consumed, 'NA' stays a string
    assert grid.cell_value("S", 0, 0) == "<END>"
    assert grid.cell_value("S", 2, 0) == "NA"
    assert grid.cell_value("S", 1, 0) is None
    assert grid.cell_value_string("S", 1, 1) == "5"

    only_t = read_excel_file(path, target_sheets={"T"})
    assert list(only_t) == ["T"]


def test_read_excel_file_broken_workbook(temp_workdir: Path):
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_bytes(b"not a workbook")
    with pytest.raises(WorkbookReadError):
        read_excel_file(path)


def test_read_excel_file_missing_engine(temp_workdir: Path, monkeypatch):
    path = temp_workdir / "data" / "legacy.xls"
    path.write_bytes(b"")

    def _no_engine(*args, **kwargs):
        raise ImportError("Missing optional dependency 'xlrd'.")

    monkeypatch.setattr(pd, "ExcelFile", _no_engine)
    with pytest.raises(WorkbookReadError, match="legacy.xls"):
        read_excel_file(path)
