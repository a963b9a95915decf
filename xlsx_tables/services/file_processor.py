from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import default_config
from ..constants import KEY_DECISION_TABLE, KEY_MATRIX_TABLE, KEY_SPECIFICATION
from ..excel.reader import WorkbookGrid, WorkbookReadError
from ..logging.diagnostics import DiagnosticLog
from ..models.config_models import ImporterConfig
from ..models.decision_table import TableDecision
from ..models.diagnostic import KIND_STRUCTURAL, LEVEL_ERROR, Diagnostic
from ..models.processing_result import FileStat, ProcessingResult
from ..models.workbook_file import FileStatus, SheetOutcome, SheetStatus, WorkbookFile
from ..parser.base import ParserBase
from ..parser.decision import DecisionParser
from ..parser.errors import ParseError
from ..parser.specification import SpecificationParser
from .progress import ProgressTracker, SheetProgressIndicator

"""File processing: workbooks -> sheets -> tables.

Every sheet carries its table type key in the start cell. Decision tables and
specification tables (converted into decision tables) are parsed, other keys
are skipped. A failing sheet never stops the file, a failing file never stops
the run.
"""

__all__ = [
    "ProcessingError",
    "WORKBOOK_SUFFIXES",
    "scan_workbook_files",
    "process_files",
    "process_all",
]

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")

FILE_LEVEL_SHEET = "<FILE_LEVEL>"


class ProcessingError(Exception):
    """Base exception for processing errors."""
    pass


def scan_workbook_files(directory: Path) -> list[Path]:
    """Scan directory for workbook files (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in WORKBOOK_SUFFIXES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def create_parser(table_type: str, config: ImporterConfig, sheet_name: str, diagnostics: DiagnosticLog) -> ParserBase | None:
    """Parser for a table type key (already upper-cased), None when there is none."""
    if table_type == KEY_DECISION_TABLE:
        return DecisionParser.from_config(config, sheet_name, diagnostics)
    elif table_type == KEY_SPECIFICATION:
        return SpecificationParser.from_config(config, sheet_name, diagnostics)
    return None


def read_table_type(grid: WorkbookGrid, sheet_name: str, config: ImporterConfig) -> str | None:
    definition = config.sheet_definition(sheet_name)
    key = grid.cell_value_string(sheet_name, definition.start_column, definition.start_row)
    if key is None:
        return None
    return key.strip().upper()


def _process_sheet(
    grid: WorkbookGrid,
    sheet_name: str,
    config: ImporterConfig,
    diagnostics: DiagnosticLog,
    tables: dict[str, TableDecision],
) -> SheetOutcome:
    table_type = read_table_type(grid, sheet_name, config)
    allowed = {key.upper() for key in config.table_type_keys}
    if table_type is None or table_type not in allowed:
        logger.debug(f"{grid.file_name}: sheet '{sheet_name}' has no table type key, skipped")
        return SheetOutcome(sheet_name=sheet_name, status=SheetStatus.SKIPPED, table_type=table_type)

    parser = create_parser(table_type, config, sheet_name, diagnostics)
    if parser is None:
        level = logging.INFO if table_type == KEY_MATRIX_TABLE else logging.WARNING
        logger.log(level, f"{grid.file_name}: no parser for table type '{table_type}' of sheet '{sheet_name}', skipped")
        return SheetOutcome(sheet_name=sheet_name, status=SheetStatus.SKIPPED, table_type=table_type)

    try:
        result = parser.parse(grid, sheet_name)
    except ParseError as e:
        # the parser already recorded the diagnostics
        logger.error(f"{grid.file_name}: sheet '{sheet_name}' could not be parsed: {e}")
        return SheetOutcome(sheet_name=sheet_name, status=SheetStatus.FAILED, table_type=table_type, error=str(e))

    if result.has_errors and config.reject_tables_with_errors:
        logger.warning(
            f"{grid.file_name}: table '{sheet_name}' rejected because of {len(result.errors)} error(s)"
        )
        return SheetOutcome(
            sheet_name=sheet_name,
            status=SheetStatus.REJECTED,
            table_type=table_type,
            error=f"{len(result.errors)} error(s)",
        )

    if sheet_name in tables:
        logger.warning(
            f"The table '{sheet_name}' from file '{tables[sheet_name].file_name}' is overwritten "
            f"by the table from file '{grid.file_name}'"
        )
    tables[sheet_name] = result.table
    return SheetOutcome(sheet_name=sheet_name, status=SheetStatus.PARSED, table_type=table_type)


def process_file(
    file_path: Path,
    config: ImporterConfig,
    diagnostics: DiagnosticLog,
    tables: dict[str, TableDecision],
) -> WorkbookFile:
    """Read one workbook and parse all of its sheets in workbook order."""
    start_time = datetime.now(UTC)
    try:
        grid = WorkbookGrid.from_file(file_path)
    except WorkbookReadError as e:
        diagnostics.append(
            Diagnostic.create(
                LEVEL_ERROR,
                KIND_STRUCTURAL,
                "process_file",
                str(e),
                file=file_path.name,
                sheet=FILE_LEVEL_SHEET,
            )
        )
        return WorkbookFile(
            path=file_path,
            name=file_path.name,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.FAILED,
            error=str(e),
        )

    sheet_names = grid.sheet_names
    sheet_progress = SheetProgressIndicator(file_name=file_path.name, total_sheets=len(sheet_names))
    outcomes: list[SheetOutcome] = []
    for sheet_name in sheet_names:
        sheet_progress.start_sheet(sheet_name)
        outcome = _process_sheet(grid, sheet_name, config, diagnostics, tables)
        outcomes.append(outcome)
        sheet_progress.finish_sheet(success=outcome.status != SheetStatus.FAILED, status=outcome.status.value)

    return WorkbookFile(
        path=file_path,
        name=file_path.name,
        sheets=outcomes,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
    )


def process_files(paths: Iterable[Path], config: ImporterConfig | None = None) -> ProcessingResult:
    """Process the given workbooks and return the loaded tables with statistics.

    Diagnostics are flushed once at the end of the run to
    ``<logs_dir>/diagnostics-*.log``.
    """
    if config is None:
        config = default_config()
    file_paths = list(paths)
    start_time = datetime.now(UTC)
    diagnostics = DiagnosticLog(config.logs_dir)
    tables: dict[str, TableDecision] = {}

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    parsed_sheets = 0
    failed_sheets = 0
    skipped_sheets = 0

    with ProgressTracker(len(file_paths), description="Processing files") as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            workbook = process_file(file_path, config, diagnostics, tables)

            if workbook.status == FileStatus.SUCCESS:
                success_count += 1
            else:
                failed_count += 1
            parsed_sheets += workbook.parsed_sheets
            failed_sheets += workbook.failed_sheets
            skipped_sheets += workbook.skipped_sheets

            progress.set_postfix(success=success_count, failed=failed_count, tables=len(tables))
            progress.finish_file(success=(workbook.status == FileStatus.SUCCESS))

            elapsed = 0.0
            if workbook.start_time is not None and workbook.end_time is not None:
                elapsed = (workbook.end_time - workbook.start_time).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=workbook.name,
                    status=workbook.status.value,
                    parsed_sheets=workbook.parsed_sheets,
                    failed_sheets=workbook.failed_sheets,
                    skipped_sheets=workbook.skipped_sheets,
                    elapsed_seconds=elapsed,
                )
            )

    try:
        diagnostics.flush()
    except OSError as e:
        # the tables are still usable without the diagnostics file
        logger.error(f"could not write diagnostics to {config.logs_dir}: {e}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        parsed_sheets=parsed_sheets,
        failed_sheets=failed_sheets,
        skipped_sheets=skipped_sheets,
        error_count=diagnostics.error_count,
        warning_count=diagnostics.warning_count,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        tables=tables,
        file_stats=file_stats,
    )


def process_all(config: ImporterConfig) -> ProcessingResult:
    """Process every workbook in ``config.source_directory``.

    Raises:
        ProcessingError: If no source directory is configured or it can't be read
    """
    if not config.source_directory:
        raise ProcessingError("No source_directory configured")
    file_paths = scan_workbook_files(Path(config.source_directory))
    logger.info(f"Found {len(file_paths)} workbook(s) in {config.source_directory}")
    return process_files(file_paths, config)
