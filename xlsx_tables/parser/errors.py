from __future__ import annotations

from ..models.diagnostic import Diagnostic

"""Parser exceptions.

Only failures that make the sheet unusable are raised. Everything else is
recorded as a diagnostic and parsing continues.
"""

__all__ = [
    "ParseError",
    "StructuralError",
    "SectionTypeError",
]


class ParseError(Exception):
    """Base class for failures aborting the parse of one sheet."""

    def __init__(self, message: str, *, sheet: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.sheet = sheet


class StructuralError(ParseError):
    """Missing end sentinel, missing Severity/Rule marker, malformed rule columns."""


class SectionTypeError(ParseError):
    """Unknown section type codes (or names without type code) found in a sheet.

    Raised once after the whole sheet was scanned; ``issues`` holds every
    finding.
    """

    def __init__(self, message: str, *, sheet: str = "", issues: list[Diagnostic] | None = None) -> None:
        super().__init__(message, sheet=sheet)
        self.issues = list(issues or [])
