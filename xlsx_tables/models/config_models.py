from __future__ import annotations

from dataclasses import dataclass, field

from ..constants import (
    DEFAULT_TABLE_TYPE_KEYS,
    KEY_TABLE_END,
    MAX_EMPTY_COLUMNS,
    MAX_EMPTY_ROWS,
    START_COLUMN,
    START_ROW,
)

"""Config dataclasses for the table importer.

These are the typed form of config/importer.yml after schema validation in
xlsx_tables/config/loader.py.
"""


@dataclass(frozen=True)
class SheetDefinition:
    """Where a table starts in a sheet and which key marks its end.

    One definition applies to every sheet unless the sheet name has its own
    entry under ``sheets`` in the config.
    """
    start_row: int = START_ROW
    start_column: int = START_COLUMN
    end_key: str = KEY_TABLE_END


@dataclass(frozen=True)
class ImporterConfig:
    """Root configuration object for importing workbooks."""
    source_directory: str | None = None  # Directory scanned by process_all
    default_sheet: SheetDefinition = field(default_factory=SheetDefinition)
    sheets: dict[str, SheetDefinition] = field(default_factory=dict)  # sheet name -> override
    # Only sheets whose start cell holds one of these keys are parsed (case-insensitive)
    table_type_keys: tuple[str, ...] = DEFAULT_TABLE_TYPE_KEYS
    max_empty_rows: int = MAX_EMPTY_ROWS
    max_empty_columns: int = MAX_EMPTY_COLUMNS
    logs_dir: str = "./logs"
    # Drop tables whose parse produced error diagnostics
    reject_tables_with_errors: bool = False

    def sheet_definition(self, sheet_name: str) -> SheetDefinition:
        return self.sheets.get(sheet_name, self.default_sheet)
