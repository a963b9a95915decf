from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..constants import (
    COLUMN_FIELD_COMMENT_OFFSET,
    COLUMN_FIELD_EQ_CLASS_OFFSET,
    COLUMN_FIELD_TDG_OFFSET,
    COLUMN_MURO_COMMENT_OFFSET,
    COLUMN_MURO_KEY_OFFSET,
    COLUMN_MURO_OTHER_OFFSET,
    COLUMN_TESTCASE_OFFSET,
)
from ..excel.reader import WorkbookGrid
from ..models.decision_table import SectionDefinition, SectionType, TableDecision
from .base import ParserBase, ParseResult, SheetContext
from .sections import Section, SectionScanner
from .values import get_boolean, get_multiplicity_from_value

"""Decision table parser.

Layout (offsets from the start cell S):

- row 0: table type key, test case names from column S+5 on
- column S: section / field names, the end key in the last row
- column S+1: section type code
- columns S+2..S+4: row metadata (key / other / comment, ...)
- columns S+5..: one value per test case

Parsing runs in two phases: the whole sheet is scanned into sections first
(section type problems abort the sheet after the complete scan), then every
section is read into row entries which are appended to the table.
"""

__all__ = [
    "RowEntry",
    "DecisionParser",
]

logger = logging.getLogger(__name__)


@dataclass
class RowEntry:
    """One data row: its metadata by model attribute name plus the test case values."""
    payload: dict[str, str | None] = field(default_factory=dict)
    values: list[str | None] = field(default_factory=list)


class DecisionParser(ParserBase):
    """Parses decision tables.

    The parser instance owns the counter used for synthetic field names, so one
    instance must not be shared between threads.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.field_name_sequence = 0

    @property
    def testcase_start_column(self) -> int:
        return self.start_column + COLUMN_TESTCASE_OFFSET

    def get_field_name(self) -> str:
        """Create a unique field name."""
        self.field_name_sequence += 1
        return f"__Field_{self.field_name_sequence}"

    def parse(self, grid: WorkbookGrid, sheet_name: str) -> ParseResult:
        ctx = self.context(grid, sheet_name)
        logger.debug(f"parse decision sheet '{sheet_name}'")

        table = TableDecision(table_name=sheet_name, file_name=grid.file_name)
        self.parse_for_testcases(ctx, table)
        sheet_end_row = self.find_end_row(ctx)

        scanner = SectionScanner(self.start_row, self.start_column, self.get_field_name)
        sections = scanner.scan_sections(ctx, sheet_end_row)

        for section in sections:
            logger.debug(f"{sheet_name}: handle section {section.section_type.value} '{section.name}'")
            self.handle_section(ctx, table, scanner, section)

        self.update_testcase_execute(table)
        self.update_testcase_never_execute(table)
        self.update_testcase_multiplicity(table)

        return ParseResult(table=table, diagnostics=list(ctx.issues))

    def parse_for_testcases(self, ctx: SheetContext, table: TableDecision) -> int:
        """Create one test case per name in the header row. Returns the last test case column."""
        column = self.testcase_start_column
        while True:
            name = ctx.text(column, self.start_row)
            if name is None:
                break
            table.add_new_testcase(name)
            column += 1
        logger.info(f"Read {len(table.testcase_order)} testcases from sheet {ctx.sheet_name}.")
        return column - 1

    def handle_section(self, ctx: SheetContext, table: TableDecision, scanner: SectionScanner, section: Section) -> SectionDefinition:
        """Create the model section for one scanned section and fill its rows."""
        section_type = section.section_type
        count = len(table.testcase_order)

        if section_type == SectionType.MULTI_ROW:
            target: SectionDefinition = table.add_new_multi_row_section(section.name)
            rows = self.read_rows(ctx, section.start_row + 1, section.end_row, count, ("keys", "others", "comments"))
            self._append_rows(table, target, rows)
        elif section_type == SectionType.TAG:
            target = table.add_new_tag_section(section.name)
            rows = self.read_rows(ctx, section.start_row + 1, section.end_row, count, ("tags", "others", "comments"))
            self._append_rows(table, target, rows)
        elif section_type == SectionType.FILTER:
            target = table.add_new_filter_section(section.name)
            rows = self.read_rows(
                ctx, section.start_row + 1, section.end_row, count, ("filter_processor_names", "expressions", "comments")
            )
            self._append_rows(table, target, rows)
        elif section_type == SectionType.GENERATOR_SWITCH:
            target = table.add_new_generator_switch_section(section.name)
            rows = self.read_rows(ctx, section.start_row + 1, section.end_row, count, ("generator_names", "values", "comments"))
            self._append_rows(table, target, rows)
        elif section_type == SectionType.SUMMARY:
            target = table.add_new_summary_section(section.name)
        elif section_type == SectionType.MULTIPLICITY:
            target = table.add_new_multiplicity_section(section.name)
            self._set_values(table, target.header_row, self.read_testcase_values(ctx, section.start_row, count))
        elif section_type == SectionType.EXECUTE:
            target = table.add_new_execute_section(section.name)
            self._set_values(table, target.header_row, self.read_testcase_values(ctx, section.start_row, count))
        elif section_type == SectionType.NEVER_EXECUTE:
            target = table.add_new_never_execute_section(section.name)
            self._set_values(table, target.header_row, self.read_testcase_values(ctx, section.start_row, count))
        elif section_type == SectionType.FIELD:
            field_section = table.add_new_field_section(section.name)
            for sub in scanner.scan_sub_sections(ctx, section):
                sub_section = field_section.create_new_field(sub.name)
                rows = self.read_rows(
                    ctx, sub.start_row + 1, sub.end_row, count, ("equivalence_classes", "tdgs", "comments")
                )
                self._append_rows(table, sub_section, rows)
            target = field_section
        else:
            raise ValueError(f"no handler for section type '{section_type.value}'")
        return target

    def read_rows(
        self,
        ctx: SheetContext,
        start_row: int,
        end_row: int,
        testcase_count: int,
        attributes: tuple[str, str, str],
    ) -> list[RowEntry]:
        """Read rows ``[start_row, end_row)``.

        ``attributes`` names the model maps receiving columns S+2, S+3 and S+4.
        Field rows store S+2 / S+3 as equivalence class / generator call, the
        other section kinds as key / other.
        """
        if attributes[0] == "equivalence_classes":
            offsets = (COLUMN_FIELD_EQ_CLASS_OFFSET, COLUMN_FIELD_TDG_OFFSET, COLUMN_FIELD_COMMENT_OFFSET)
        else:
            offsets = (COLUMN_MURO_KEY_OFFSET, COLUMN_MURO_OTHER_OFFSET, COLUMN_MURO_COMMENT_OFFSET)
        rows: list[RowEntry] = []
        for row in range(start_row, end_row):
            payload = {
                name: ctx.text(self.start_column + offset, row)
                for name, offset in zip(attributes, offsets, strict=True)
            }
            rows.append(RowEntry(payload=payload, values=self.read_testcase_values(ctx, row, testcase_count)))
        return rows

    def read_testcase_values(self, ctx: SheetContext, row: int, testcase_count: int) -> list[str | None]:
        """The test case value strip of one row."""
        return [ctx.text(self.testcase_start_column + tc, row) for tc in range(testcase_count)]

    def _append_rows(self, table: TableDecision, target: SectionDefinition, rows: list[RowEntry]) -> None:
        for entry in rows:
            row_id = target.create_new_row()
            for attribute, value in entry.payload.items():
                if value is not None:
                    getattr(target, attribute)[row_id] = value
            self._set_values(table, row_id, entry.values)

    def _set_values(self, table: TableDecision, row_id: str, values: list[str | None]) -> None:
        for testcase_id, value in zip(table.testcase_order, values, strict=False):
            table.testcases[testcase_id].set_value(row_id, value)

    def update_testcase_execute(self, table: TableDecision) -> None:
        section = table.single_check.get(SectionType.EXECUTE)
        if section is not None:
            for testcase in table.ordered_testcases:
                testcase.execute = get_boolean(testcase.data.get(section.header_row))

    def update_testcase_never_execute(self, table: TableDecision) -> None:
        section = table.single_check.get(SectionType.NEVER_EXECUTE)
        if section is not None:
            for testcase in table.ordered_testcases:
                testcase.never_execute = get_boolean(testcase.data.get(section.header_row))

    def update_testcase_multiplicity(self, table: TableDecision) -> None:
        section = table.single_check.get(SectionType.MULTIPLICITY)
        if section is not None:
            for testcase in table.ordered_testcases:
                testcase.multiplicity = get_multiplicity_from_value(testcase.data.get(section.header_row))
