from __future__ import annotations

import logging

from ..constants import COLUMN_RULE_OFFSET, KEY_RULE, KEY_SEVERITY, MAX_EMPTY_RULE_COLUMNS
from ..converter.specification_converter import SpecificationConverter
from ..excel.reader import WorkbookGrid
from ..models.diagnostic import KIND_VALIDATION
from ..models.specification import FieldRule, Specification, SpecificationField, SpecificationRule
from .base import ParserBase, ParseResult, SheetContext
from .errors import StructuralError

"""Specification table parser.

Layout (offsets from the start cell S, header row H = start row + 1):

    row H            | name  | internal name | rule names (S+2 ... end column)
    rows H+1..       | field | field_internal| rule values per field
    'Severity' row   |
    severity rows    | name  |               | one mark per rule column
    'Rule' row       |
    rule rows        | name  | short desc    | long desc
    <END>

Validation problems are recorded and parsing goes on; only a missing end key,
missing Severity / Rule markers and malformed rule columns abort the sheet.
The parsed specification is converted into a decision table.
"""

__all__ = [
    "SpecificationParser",
]

logger = logging.getLogger(__name__)


class SpecificationParser(ParserBase):
    """Parses specification tables and converts them into decision tables."""

    @property
    def header_row(self) -> int:
        return self.start_row + 1

    @property
    def first_rule_column(self) -> int:
        return self.start_column + COLUMN_RULE_OFFSET

    def parse(self, grid: WorkbookGrid, sheet_name: str) -> ParseResult:
        ctx = self.context(grid, sheet_name)
        specification = self.parse_specification(ctx)
        table = SpecificationConverter().convert(specification, ctx=ctx, file_name=grid.file_name)
        return ParseResult(table=table, diagnostics=list(ctx.issues), specification=specification)

    def parse_specification(self, ctx: SheetContext) -> Specification:
        logger.debug(f"parse specification sheet '{ctx.sheet_name}'")
        specification = Specification(name=ctx.sheet_name)

        sheet_end_row = self.find_end_row(ctx)
        sheet_end_column = self.get_end_column(ctx)
        severity_row, rule_row = self.check_sheet_rows(ctx, sheet_end_row)

        field_order, fields = self.parse_fields(ctx, severity_row, rule_row, sheet_end_column)
        rules = self.parse_rules(ctx, rule_row, sheet_end_row)
        severities = self.parse_severities(ctx, severity_row, rule_row, sheet_end_column)
        self.check_for_unused_rules(ctx, severity_row, sheet_end_column, rules)

        specification.field_order = field_order
        specification.fields = fields
        specification.rules = rules
        specification.severities = severities
        return specification

    def get_end_column(self, ctx: SheetContext) -> int:
        """Last rule column: the column before the first empty rule name.

        A rule name further right (after the gap) means an empty rule column.
        """
        column = self.first_rule_column
        while ctx.text(column, self.header_row) is not None:
            column += 1
        end_column = column - 1

        if end_column < self.first_rule_column:
            raise self.structural_error(
                ctx,
                "get_end_column",
                f"The specification sheet '{ctx.sheet_name}' does not contain any rule",
                row=self.header_row,
            )

        for i in range(end_column + 1, end_column + MAX_EMPTY_RULE_COLUMNS):
            if ctx.text(i, self.header_row) is not None:
                raise self.structural_error(
                    ctx,
                    "get_end_column",
                    f"The specification sheet '{ctx.sheet_name}' contains empty rule columns",
                    row=self.header_row,
                    column=i,
                )
        return end_column

    def check_sheet_rows(self, ctx: SheetContext, sheet_end_row: int) -> tuple[int, int]:
        """Locate the 'Severity' and 'Rule' marker rows. Both are required."""
        severity_row: int | None = None
        rule_row: int | None = None
        for row in range(self.start_row + 1, sheet_end_row):
            val = ctx.text(self.start_column, row)
            if val == KEY_SEVERITY:
                severity_row = row
            elif val == KEY_RULE:
                rule_row = row

        if severity_row is not None and rule_row is not None:
            if rule_row < severity_row:
                raise self.structural_error(
                    ctx,
                    "check_sheet_rows",
                    f"The '{KEY_RULE}' section must follow the '{KEY_SEVERITY}' section",
                    row=rule_row,
                    column=self.start_column,
                )
            return severity_row, rule_row

        missing = []
        if severity_row is None:
            missing.append(KEY_SEVERITY)
        if rule_row is None:
            missing.append(KEY_RULE)
        errors = [
            self.structural_error(
                ctx, "check_sheet_rows", f"The '{key}' section could not be found", column=self.start_column
            )
            for key in missing
        ]
        raise StructuralError(
            "; ".join(str(e) for e in errors) + f" in the sheet '{ctx.sheet_name}'",
            sheet=ctx.sheet_name,
        )

    def get_severity(self, ctx: SheetContext, column: int, severity_row: int, rule_row: int) -> str | None:
        """The severity marked for one rule column. Exactly one mark is expected."""
        found_row: int | None = None
        for row in range(severity_row + 1, rule_row):
            if ctx.text(column, row) is None:
                continue
            if found_row is None:
                found_row = row
            else:
                ctx.error(
                    KIND_VALIDATION,
                    "get_severity",
                    f"The rule in column '{column}' has more than one severity assigned",
                    row=row,
                    column=column,
                )

        if found_row is None:
            ctx.error(
                KIND_VALIDATION,
                "get_severity",
                f"The rule in column '{column}' has no severity assigned",
                column=column,
            )
            return None
        return ctx.text(self.start_column, found_row)

    def parse_fields(
        self, ctx: SheetContext, severity_row: int, rule_row: int, sheet_end_column: int
    ) -> tuple[list[str], dict[str, SpecificationField]]:
        """Read the field rows between the header row and the Severity marker."""
        rule_columns = range(self.first_rule_column, sheet_end_column + 1)
        # severity is per column, the same for every field
        severity_map = {col: self.get_severity(ctx, col, severity_row, rule_row) for col in rule_columns}

        field_order: list[str] = []
        fields: dict[str, SpecificationField] = {}
        for row in range(self.header_row + 1, severity_row):
            name = ctx.text(self.start_column, row)
            internal_name = ctx.text(self.start_column + 1, row)
            if name is None or internal_name is None:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_fields",
                    f"In the row '{row}' there is no field name defined",
                    row=row,
                )
                continue

            rules: list[FieldRule] = []
            for col in rule_columns:
                rule_name = ctx.text(col, self.header_row)
                value = ctx.text(col, row)
                severity = severity_map[col]
                if value is not None and rule_name is not None and severity is not None:
                    rules.append(FieldRule(rule_name=rule_name, value=value, severity=severity))

            if not rules:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_fields",
                    f"No rules defined for the field '{internal_name}' or the rules are not complete.",
                    row=row,
                )

            if name in fields:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_fields",
                    f"The field '{name}' is double defined",
                    row=row,
                )
                continue
            field_order.append(name)
            fields[name] = SpecificationField(name=name, internal_name=internal_name, rules=rules)
        return field_order, fields

    def parse_rules(self, ctx: SheetContext, rule_row: int, sheet_end_row: int) -> dict[str, SpecificationRule]:
        """Read the rule rows between the Rule marker and the end row."""
        rules: dict[str, SpecificationRule] = {}
        for row in range(rule_row + 1, sheet_end_row):
            rule_name = ctx.text(self.start_column, row)
            short_desc = ctx.text(self.start_column + 1, row)
            long_desc = ctx.text(self.start_column + 2, row)

            if short_desc is None:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_rules",
                    f"The short description for the rule '{rule_name}' is not defined",
                    row=row,
                )
            if long_desc is None:
                ctx.warning(
                    KIND_VALIDATION,
                    "parse_rules",
                    f"The long description for the rule '{rule_name}' is not defined",
                    row=row,
                )
            if rule_name is None:
                ctx.error(KIND_VALIDATION, "parse_rules", "The rule name is not defined", row=row)

            if rule_name is not None and short_desc is not None:
                if rule_name in rules:
                    ctx.error(
                        KIND_VALIDATION,
                        "parse_rules",
                        f"The rule '{rule_name}' is double defined",
                        row=row,
                    )
                rules[rule_name] = SpecificationRule(name=rule_name, short_desc=short_desc, long_desc=long_desc)
        return rules

    def parse_severities(self, ctx: SheetContext, severity_row: int, rule_row: int, sheet_end_column: int) -> list[str]:
        """Read the severity names (declaration order, duplicates dropped)."""
        severities: list[str] = []
        for row in range(severity_row + 1, rule_row):
            severity = ctx.text(self.start_column, row)
            if severity is None:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_severities",
                    f"In the row '{row}' is no severity name defined",
                    row=row,
                )
                continue
            if severity in severities:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_severities",
                    f"The severity '{severity}' is double defined",
                    row=row,
                )
                continue

            used = any(
                ctx.text(col, row) is not None for col in range(self.first_rule_column, sheet_end_column + 1)
            )
            if not used:
                ctx.error(
                    KIND_VALIDATION,
                    "parse_severities",
                    f"The severity '{severity}' is not used",
                    row=row,
                )
            severities.append(severity)
        return severities

    def check_for_unused_rules(
        self, ctx: SheetContext, severity_row: int, sheet_end_column: int, rules: dict[str, SpecificationRule]
    ) -> None:
        """Every rule column must name a defined rule and every defined rule must be used."""
        used_rules: set[str] = set()
        for col in range(self.first_rule_column, sheet_end_column + 1):
            rule_name = ctx.text(col, self.header_row)
            if rule_name is None:
                continue
            used_rules.add(rule_name)

            if rule_name not in rules:
                ctx.error(
                    KIND_VALIDATION,
                    "check_for_unused_rules",
                    f"The rule '{rule_name}' does not exist in the rule section",
                    row=self.header_row,
                    column=col,
                )

            has_value = any(ctx.text(col, row) is not None for row in range(self.header_row + 1, severity_row))
            if not has_value:
                ctx.error(
                    KIND_VALIDATION,
                    "check_for_unused_rules",
                    f"The rule '{rule_name}' is not used",
                    row=self.header_row,
                    column=col,
                )

        for rule_name in rules:
            if rule_name not in used_rules:
                ctx.error(
                    KIND_VALIDATION,
                    "check_for_unused_rules",
                    f"The defined rule '{rule_name}' in the rule section is not used",
                )
