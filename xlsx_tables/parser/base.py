from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..constants import KEY_TABLE_END, MAX_EMPTY_COLUMNS, MAX_EMPTY_ROWS, START_COLUMN, START_ROW
from ..excel.reader import CellValue, WorkbookGrid
from ..logging.diagnostics import DiagnosticLog
from ..models.config_models import ImporterConfig
from ..models.diagnostic import (
    KIND_STRUCTURAL,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_WARNING,
    Diagnostic,
)
from .errors import StructuralError

"""Parser base: per-sheet context, parse result and end-of-table detection.

Every table type has its own parser; they share the start cell / end key
settings and the boundary scan that finds the last row and column of a table.
"""

__all__ = [
    "SheetContext",
    "ParseResult",
    "ParserBase",
]

logger = logging.getLogger(__name__)


@dataclass
class SheetContext:
    """State of one parse call: the grid, the sheet and the findings so far."""
    grid: WorkbookGrid
    sheet_name: str
    file_name: str = ""
    sink: DiagnosticLog | None = None
    issues: list[Diagnostic] = field(default_factory=list)

    def value(self, column: int, row: int) -> CellValue:
        return self.grid.cell_value(self.sheet_name, column, row)

    def text(self, column: int, row: int) -> str | None:
        return self.grid.cell_value_string(self.sheet_name, column, row)

    def report(
        self,
        level: str,
        kind: str,
        function: str,
        message: str,
        row: int | None = None,
        column: int | None = None,
    ) -> Diagnostic:
        record = Diagnostic.create(
            level,
            kind,
            function,
            message,
            file=self.file_name,
            sheet=self.sheet_name,
            row=row,
            column=column,
        )
        self.issues.append(record)
        if self.sink is not None:
            self.sink.append(record)
        return record

    def error(self, kind: str, function: str, message: str, row: int | None = None, column: int | None = None) -> Diagnostic:
        return self.report(LEVEL_ERROR, kind, function, message, row, column)

    def warning(self, kind: str, function: str, message: str, row: int | None = None, column: int | None = None) -> Diagnostic:
        return self.report(LEVEL_WARNING, kind, function, message, row, column)

    def info(self, kind: str, function: str, message: str, row: int | None = None, column: int | None = None) -> Diagnostic:
        return self.report(LEVEL_INFO, kind, function, message, row, column)

    def errors_of_kind(self, kind: str) -> list[Diagnostic]:
        return [d for d in self.issues if d.is_error and d.kind == kind]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.issues)


@dataclass
class ParseResult:
    """A parsed table together with every diagnostic recorded while parsing.

    ``table`` is a TableDecision; ``specification`` is only set by the
    specification parser.
    """
    table: Any
    diagnostics: list[Diagnostic] = field(default_factory=list)
    specification: Any = None

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)


class ParserBase:
    """Common settings of all table parsers.

    Parameters:
        start_row / start_column: the start cell of the table (holds the table type key)
        end_key: the sentinel marking the last row and column of the table
        max_empty_rows / max_empty_columns: tolerated run of empty cells while
            searching the sentinel
        diagnostics: optional sink receiving every diagnostic record
    """

    def __init__(
        self,
        *,
        start_row: int = START_ROW,
        start_column: int = START_COLUMN,
        end_key: str = KEY_TABLE_END,
        max_empty_rows: int = MAX_EMPTY_ROWS,
        max_empty_columns: int = MAX_EMPTY_COLUMNS,
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.start_row = start_row
        self.start_column = start_column
        self.end_key = end_key
        self.max_empty_rows = max_empty_rows
        self.max_empty_columns = max_empty_columns
        self.diagnostics = diagnostics

    @classmethod
    def from_config(cls, config: ImporterConfig, sheet_name: str, diagnostics: DiagnosticLog | None = None):
        definition = config.sheet_definition(sheet_name)
        return cls(
            start_row=definition.start_row,
            start_column=definition.start_column,
            end_key=definition.end_key,
            max_empty_rows=config.max_empty_rows,
            max_empty_columns=config.max_empty_columns,
            diagnostics=diagnostics,
        )

    def context(self, grid: WorkbookGrid, sheet_name: str) -> SheetContext:
        return SheetContext(grid=grid, sheet_name=sheet_name, file_name=grid.file_name, sink=self.diagnostics)

    def parse(self, grid: WorkbookGrid, sheet_name: str) -> ParseResult:
        raise NotImplementedError

    def structural_error(
        self,
        ctx: SheetContext,
        function: str,
        message: str,
        row: int | None = None,
        column: int | None = None,
    ) -> StructuralError:
        """Record a STRUCTURAL diagnostic and return the exception to raise."""
        ctx.error(KIND_STRUCTURAL, function, message, row=row, column=column)
        return StructuralError(message, sheet=ctx.sheet_name)

    def find_end_row(self, ctx: SheetContext, max_empty: int | None = None) -> int:
        """Return the row holding the end key in the start column.

        Scanning starts one row below the start row. Raises StructuralError when
        ``max_empty`` consecutive empty cells are seen before the key.
        """
        if max_empty is None:
            max_empty = self.max_empty_rows
        row = self.start_row + 1
        empty = 0
        while empty < max_empty:
            val = ctx.value(self.start_column, row)
            if val is None:
                empty += 1
            else:
                empty = 0
                if val == self.end_key:
                    logger.debug(f"{ctx.sheet_name}: end key '{self.end_key}' in row {row}")
                    return row
            row += 1
        raise self.structural_error(
            ctx,
            "find_end_row",
            f"Could not find the end sheet identifier '{self.end_key}' in the sheet "
            f"'{ctx.sheet_name}' in column '{self.start_column}'",
            column=self.start_column,
        )

    def find_end_column(self, ctx: SheetContext, max_empty: int | None = None) -> int:
        """Return the column holding the end key in the start row."""
        if max_empty is None:
            max_empty = self.max_empty_columns
        column = self.start_column + 1
        empty = 0
        while empty < max_empty:
            val = ctx.value(column, self.start_row)
            if val is None:
                empty += 1
            else:
                empty = 0
                if val == self.end_key:
                    logger.debug(f"{ctx.sheet_name}: end key '{self.end_key}' in column {column}")
                    return column
            column += 1
        raise self.structural_error(
            ctx,
            "find_end_column",
            f"Could not find the end sheet identifier '{self.end_key}' in the sheet "
            f"'{ctx.sheet_name}' in row '{self.start_row}'",
            row=self.start_row,
        )
