from __future__ import annotations

import re

from ..excel.reader import CellValue

"""Cell value coercions used by the Execute / NeverExecute / Multiplicity post-passes."""

__all__ = [
    "get_boolean",
    "get_multiplicity_from_value",
]

_TRUE_PATTERN = re.compile(r"[tyj]|1|yes|ja|si|true|ok", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def get_boolean(val: CellValue | bool) -> bool:
    """Interpret a cell as a flag.

    >>> [get_boolean(v) for v in ("t", "YES", "1", "ok", "2", "no", "", None, " ")]
    [True, True, True, True, False, False, False, False, False]
    """
    if val is None:
        return False
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)):
        return val > 0
    return _TRUE_PATTERN.fullmatch(val) is not None


def get_multiplicity_from_value(val: CellValue) -> int:
    """Parse a multiplicity cell; anything not a positive integer gives 1.

    Only the leading integer counts ('3.45' -> 3, '  3' -> 3).
    """
    if val is None or isinstance(val, bool):
        return 1
    if isinstance(val, (int, float)):
        number = int(val)
    else:
        match = _LEADING_INT.match(val)
        if match is None:
            return 1
        number = int(match.group(1))
    return number if number > 0 else 1
