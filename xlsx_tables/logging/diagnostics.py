from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic import LEVEL_ERROR, LEVEL_INFO, LEVEL_WARNING, Diagnostic

"""Diagnostics sink: buffering and JSON Lines output.

- Fixed-schema JSON Lines (see Diagnostic.to_json_line)
- One file per run: ``<logs_dir>/diagnostics-YYYYMMDD-HHMMSS.log`` (UTC),
  created on first flush
- Every appended record is also forwarded to the application logger

Parsers only ever append; nothing in the parsing path reads records back.
"""

__all__ = [
    "Diagnostic",
    "DiagnosticLog",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    LEVEL_ERROR: logging.ERROR,
    LEVEL_WARNING: logging.WARNING,
    LEVEL_INFO: logging.INFO,
}


class DiagnosticLog:
    """In-memory buffer of diagnostic records. Flush writes JSON Lines.

    Serial use only (one sheet at a time).
    """
    def __init__(self, logs_dir: Path | str = Path("./logs")) -> None:
        self._records: list[Diagnostic] = []
        self._logs_dir = Path(logs_dir)
        self._file_path: Path | None = None
        self.error_count = 0
        self.warning_count = 0

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"diagnostics-{stamp}.log"
        return self._file_path

    def append(self, record: Diagnostic) -> None:
        self._records.append(record)
        if record.level == LEVEL_ERROR:
            self.error_count += 1
        elif record.level == LEVEL_WARNING:
            self.warning_count += 1
        location = record.location()
        suffix = f" ({location})" if location else ""
        logger.log(
            _LOG_LEVELS.get(record.level, logging.INFO),
            f"{record.function}: {record.message}{suffix}",
        )

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path:
        if not self._records:
            return self.file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
