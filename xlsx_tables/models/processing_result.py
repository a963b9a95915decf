from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

"""Processing result models for the table importer.

Aggregates what the file processor produced: the loaded tables (decision
tables, including the ones converted from specifications), per-file statistics
and diagnostic counts for the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    parsed_sheets: int
    failed_sheets: int
    skipped_sheets: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results and summary output for one import run."""
    success_files: int
    failed_files: int
    parsed_sheets: int
    failed_sheets: int
    skipped_sheets: int
    error_count: int  # error diagnostics recorded during the run
    warning_count: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    tables: dict[str, Any] = field(default_factory=dict)  # sheet name -> TableDecision
    file_stats: list[FileStat] | None = None
