from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""Diagnostic model for parser / converter findings.

A Diagnostic is one structured record written to the diagnostics sink while a
sheet is parsed. Records are written only; the parsers never read them back.

The JSON Lines form has a fixed key set so that the log files can be consumed
by other tools without guessing the schema.
"""

__all__ = [
    "Diagnostic",
    "LEVEL_ERROR",
    "LEVEL_WARNING",
    "LEVEL_INFO",
    "KIND_STRUCTURAL",
    "KIND_SECTION_TYPE",
    "KIND_VALIDATION",
    "KIND_CONVERSION",
    "KIND_INFO",
]

LEVEL_ERROR = "error"
LEVEL_WARNING = "warning"
LEVEL_INFO = "info"

# Diagnostic kinds (UPPER_SNAKE)
KIND_STRUCTURAL = "STRUCTURAL"  # fatal for the current sheet
KIND_SECTION_TYPE = "SECTION_TYPE"  # collected, then fatal after the full scan
KIND_VALIDATION = "VALIDATION"  # non-fatal
KIND_CONVERSION = "CONVERSION"  # non-fatal, item skipped
KIND_INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    """Structured diagnostic record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        level: error / warning / info
        kind: Diagnostic classification in UPPER_SNAKE_CASE format
        function: Name of the parser step reporting the record
        message: Human readable description
        file: Workbook file name ('' when parsing an in-memory grid)
        sheet: Sheet name
        row: Zero-based row index, None when not row specific
        column: Zero-based column index, None when not column specific
    """
    timestamp: str
    level: str
    kind: str
    function: str
    message: str
    file: str
    sheet: str
    row: int | None = None
    column: int | None = None

    @staticmethod
    def create(
        level: str,
        kind: str,
        function: str,
        message: str,
        *,
        file: str = "",
        sheet: str = "",
        row: int | None = None,
        column: int | None = None,
    ) -> Diagnostic:
        """Create a new Diagnostic with the current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return Diagnostic(
            timestamp=ts,
            level=level,
            kind=kind,
            function=function,
            message=message,
            file=file,
            sheet=sheet,
            row=row,
            column=column,
        )

    @property
    def is_error(self) -> bool:
        return self.level == LEVEL_ERROR

    def location(self) -> str:
        parts = []
        if self.file:
            parts.append(f"file={self.file}")
        if self.sheet:
            parts.append(f"sheet={self.sheet}")
        if self.row is not None:
            parts.append(f"row={self.row}")
        if self.column is not None:
            parts.append(f"column={self.column}")
        return " ".join(parts)

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines entry (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
