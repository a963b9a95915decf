from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY files={success+failed} success={success} failed={failed} tables={tables}
parsed_sheets={parsed} failed_sheets={failed} skipped_sheets={skipped}
errors={errors} warnings={warnings} elapsed_sec={elapsed}
(one line, fields separated by single spaces)
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}"


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line of a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2023, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2023, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, parsed_sheets=2, failed_sheets=0,
        ...     skipped_sheets=1, error_count=0, warning_count=3,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)  # doctest: +ELLIPSIS
        'SUMMARY files=1 success=1 failed=0 tables=0 parsed_sheets=2 ... elapsed_sec=2'
    """
    total_files = result.success_files + result.failed_files
    return (
        f"SUMMARY files={total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"tables={len(result.tables)} "
        f"parsed_sheets={result.parsed_sheets} "
        f"failed_sheets={result.failed_sheets} "
        f"skipped_sheets={result.skipped_sheets} "
        f"errors={result.error_count} "
        f"warnings={result.warning_count} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
