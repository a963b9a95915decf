# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from xlsx_tables.excel.reader import WorkbookGrid
from xlsx_tables.logging.init import reset_logging


def decision_rows() -> list[list[Any]]:
    """A decision table using every section type, three test cases."""
    return [
        ["<DECISION_TABLE>", None, None, None, None, "tc1", "tc2", "tc3"],
        ["Execute", "ExecuteSection", None, None, None, "yes", None, "1"],
        ["Never", "NeverExecuteSection", None, None, None, None, "ja", None],
        ["Multiplicity", "MultiplicitySection", None, None, None, "3", None, "dd"],
        ["Person", "FieldSection"],
        ["first name", "FieldSubSection"],
        [None, None, "valid", "gen:name", "a valid name", "x", None, None],
        [None, None, "invalid", None, None, None, "x", "x"],
        ["last name", "FieldSubSection"],
        [None, None, "empty", None, None, "x", "x", None],
        ["Tags", "TagSection"],
        [None, None, "smoke", "other tag", "tag comment", "x", None, None],
        ["Filter", "FilterSection"],
        [None, None, "filterProc", "a > 1", None, "a", None, None],
        ["Generator", "GeneratorSwitchSection"],
        [None, None, "gen", "off", None, None, "x", None],
        ["Result", "MultiRowSection"],
        [None, None, "OK", "other", "all good", "x", None, None],
        ["Summary", "SummarySection"],
        ["<END>"],
    ]


def specification_rows() -> list[list[Any]]:
    """A valid specification: two fields, a custom rule, no PK."""
    return [
        ["<SPECIFICATION>"],
        ["Name", "Internal", "TYPE", "C1", "C2", "C3", "CHK"],
        ["First name", "first_name", "string", "x", "2", "20", None],
        ["Age", "age", "integer", None, "0", None, "x"],
        ["Severity"],
        ["Abort", None, None, "x", None, None, "x"],
        ["Warning", None, "x", None, "x", "x", None],
        ["Rule"],
        ["TYPE", "Field Type", "The type of the field"],
        ["C1", "Mandatory", "The field must be set"],
        ["C2", "Minimum", "Minimum length or value"],
        ["C3", "Maximum", "Maximum length or value"],
        ["CHK", "Checksum must match", "Custom checksum rule"],
        ["<END>"],
    ]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()


@pytest.fixture()
def decision_sheet_rows() -> list[list[Any]]:
    return decision_rows()


@pytest.fixture()
def specification_sheet_rows() -> list[list[Any]]:
    return specification_rows()


@pytest.fixture()
def make_grid():
    """Build a WorkbookGrid from ``{sheet_name: rows}``."""
    def _make(sheets: dict[str, list[list[Any]]], file_name: str = "test.xlsx") -> WorkbookGrid:
        return WorkbookGrid.from_rows(sheets, file_name=file_name)
    return _make


@pytest.fixture()
def decision_grid(make_grid) -> WorkbookGrid:
    return make_grid({"Decision": decision_rows()})


@pytest.fixture()
def specification_grid(make_grid) -> WorkbookGrid:
    return make_grid({"Spec": specification_rows()})


@pytest.fixture()
def write_workbook(temp_workdir: Path):
    """Write ``{sheet_name: rows}`` as an .xlsx file below data/."""
    def _write(name: str, sheets: dict[str, list[list[Any]]]) -> Path:
        path = temp_workdir / "data" / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _write


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
max_empty_rows: 50
table_type_keys: ["<DECISION_TABLE>", "<SPECIFICATION>"]
sheets:
  Shifted:
    start_row: 2
    start_column: 1
logs_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "importer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
