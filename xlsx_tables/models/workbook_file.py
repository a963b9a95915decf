from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

"""WorkbookFile domain model and FileStatus enum.

The WorkbookFile represents the processing context for a single workbook,
tracking its status from discovery to success/failed and the outcome of each
sheet.
"""


class FileStatus(Enum):
    """Status enum for WorkbookFile processing lifecycle.

    State transitions: pending → processing → (success | failed)

    - PENDING: File discovered but not yet processed
    - PROCESSING: File is currently being processed
    - SUCCESS: File read; every sheet was parsed, skipped or failed on its own
    - FAILED: File could not be read at all
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


class SheetStatus(Enum):
    PARSED = "parsed"
    SKIPPED = "skipped"  # no table type key or no parser for it
    REJECTED = "rejected"  # parsed with errors and reject_tables_with_errors is set
    FAILED = "failed"  # structural / section type failure


@dataclass(frozen=True)
class SheetOutcome:
    sheet_name: str
    status: SheetStatus
    table_type: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class WorkbookFile:
    """Processing context for a single workbook file."""
    path: Path
    name: str
    sheets: list[SheetOutcome] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: FileStatus = FileStatus.PENDING
    error: str | None = None  # Failure reason summary

    @property
    def parsed_sheets(self) -> int:
        return sum(1 for s in self.sheets if s.status == SheetStatus.PARSED)

    @property
    def failed_sheets(self) -> int:
        return sum(1 for s in self.sheets if s.status in (SheetStatus.FAILED, SheetStatus.REJECTED))

    @property
    def skipped_sheets(self) -> int:
        return sum(1 for s in self.sheets if s.status == SheetStatus.SKIPPED)
