from __future__ import annotations

"""Sheet layout constants shared by the decision and specification parsers.

All column/row values are offsets relative to the parser's start cell
(``start_column`` / ``start_row``), which defaults to ``(0, 0)``.
"""

# Default start cell of a table in a sheet
START_ROW = 0
START_COLUMN = 0

# 終端キー探索時に許容する連続空行/空列の数
MAX_EMPTY_ROWS = 100
MAX_EMPTY_COLUMNS = 20

# The identifier marking the last row (first column) or last column (header row)
KEY_TABLE_END = "<END>"

# Table type keys read from the start cell of each sheet
KEY_DECISION_TABLE = "<DECISION_TABLE>"
KEY_MATRIX_TABLE = "<MATRIX_TABLE>"
KEY_SPECIFICATION = "<SPECIFICATION>"
DEFAULT_TABLE_TYPE_KEYS = (KEY_DECISION_TABLE, KEY_MATRIX_TABLE, KEY_SPECIFICATION)

# ---------------------------------------------------------------------------
# Decision table layout
# ---------------------------------------------------------------------------

# Row 0 holds the table type key and the test case names
DECISION_START_ROW_OFFSET = 1

COLUMN_TYPE_OFFSET = 1

# Field sub-section rows
COLUMN_FIELD_EQ_CLASS_OFFSET = 2
COLUMN_FIELD_TDG_OFFSET = 3
COLUMN_FIELD_COMMENT_OFFSET = 4

# MultiRow / Tag / Filter / GeneratorSwitch rows
COLUMN_MURO_KEY_OFFSET = 2
COLUMN_MURO_OTHER_OFFSET = 3
COLUMN_MURO_COMMENT_OFFSET = 4

COLUMN_TESTCASE_OFFSET = 5

# ---------------------------------------------------------------------------
# Specification table layout
# ---------------------------------------------------------------------------

# Rules handled by the built-in equivalence class derivation
RULE: dict[str, str] = {
    "PK": "Primary Key",
    "TYPE": "Field Type",
    "C1": "Mandatory",
    "C2": "Minimum",
    "C3": "Maximum",
    "C4": "Email",
    "C5": "Regular Expression",
}

KEY_PRIMARY_KEY_RULE = "PK"

COLUMN_RULE_OFFSET = 2
KEY_SEVERITY = "Severity"
KEY_RULE = "Rule"

# Columns checked for stray rule names after the last rule column
MAX_EMPTY_RULE_COLUMNS = 100
