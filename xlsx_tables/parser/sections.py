from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..constants import COLUMN_TYPE_OFFSET, DECISION_START_ROW_OFFSET
from ..models.decision_table import SINGLE_SECTION_TYPES, SectionType
from ..models.diagnostic import KIND_SECTION_TYPE, KIND_STRUCTURAL, KIND_VALIDATION
from .base import SheetContext
from .errors import SectionTypeError, StructuralError

"""Section and sub-section scanning of decision sheets.

A decision sheet is a stack of sections. The first row of a section carries the
section name in the start column and the section type code in the type column;
the following rows without a type code belong to it. Inside a FieldSection the
same convention splits the rows into fields, each opened by a
``FieldSubSection`` type code.

All ranges are half-open ``[start_row, end_row)``.
"""

__all__ = [
    "Section",
    "SubSection",
    "SectionScanner",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    section_type: SectionType
    name: str
    start_row: int
    end_row: int

    @property
    def header_row(self) -> int:
        return self.start_row


@dataclass(frozen=True)
class SubSection:
    name: str
    start_row: int
    end_row: int
    parent: str  # name of the FieldSection


class SectionScanner:
    """Walks the type column of a decision sheet.

    Parameters:
        start_row / start_column: start cell of the table
        next_field_name: supplies a unique name for fields without one
    """

    def __init__(self, start_row: int, start_column: int, next_field_name: Callable[[], str]) -> None:
        self.name_column = start_column
        self.type_column = start_column + COLUMN_TYPE_OFFSET
        self.first_content_row = start_row + DECISION_START_ROW_OFFSET
        self.next_field_name = next_field_name

    def next_section(self, ctx: SheetContext, start_row: int, sheet_end_row: int) -> tuple[int | None, int, SectionType | None]:
        """Find the section starting at or after ``start_row``.

        Returns ``(section_start_row, section_end_row, section_type)``; the start
        row is None when no valid section type was found before the sheet end.
        Problems are recorded as SECTION_TYPE diagnostics, the walk goes on.
        """
        section_start_row: int | None = None
        section_type: SectionType | None = None
        row = start_row
        while row < sheet_end_row:
            type_code = ctx.text(self.type_column, row)
            first_col = ctx.text(self.name_column, row)

            if first_col is not None and type_code is None and row > self.first_content_row:
                ctx.error(
                    KIND_SECTION_TYPE,
                    "next_section",
                    f"If a name is entered in column '{self.name_column}' a section type must be "
                    f"provided in column '{self.type_column}'",
                    row=row,
                    column=self.name_column,
                )

            if type_code is not None:
                found = SectionType.from_code(type_code)
                if found is None:
                    ctx.error(
                        KIND_SECTION_TYPE,
                        "next_section",
                        f"Invalid section type '{type_code}' found.",
                        row=row,
                        column=self.type_column,
                    )
                elif found != SectionType.FIELD_SUB:
                    if section_start_row is None:
                        section_start_row = row
                        section_type = found
                    else:
                        # start of the next section
                        logger.debug(f"{ctx.sheet_name}: section '{section_type}' rows {section_start_row}-{row}")
                        return section_start_row, row, section_type
            row += 1
        return section_start_row, sheet_end_row, section_type

    def scan_sections(self, ctx: SheetContext, sheet_end_row: int) -> list[Section]:
        """Split the sheet into sections, then fail once if any section type problem was found."""
        sections: list[Section] = []
        seen_single: set[SectionType] = set()
        current = self.first_content_row
        while current < sheet_end_row:
            start, end, section_type = self.next_section(ctx, current, sheet_end_row)
            if start is None or section_type is None:
                break

            name = ctx.text(self.name_column, start)
            if name is None:
                ctx.error(
                    KIND_SECTION_TYPE,
                    "scan_sections",
                    f"No section name defined in row '{start}'",
                    row=start,
                    column=self.name_column,
                )
                name = f"__{section_type.value}_{start}"

            if section_type in SINGLE_SECTION_TYPES:
                if section_type in seen_single:
                    ctx.error(
                        KIND_SECTION_TYPE,
                        "scan_sections",
                        f"Only one section of type '{section_type.value}' is allowed, found another one "
                        f"named '{name}'",
                        row=start,
                        column=self.type_column,
                    )
                seen_single.add(section_type)

            sections.append(Section(section_type=section_type, name=name, start_row=start, end_row=end))
            current = end

        problems = ctx.errors_of_kind(KIND_SECTION_TYPE)
        if problems:
            raise SectionTypeError(
                f"Could not parse the sheet '{ctx.sheet_name}' because of {len(problems)} section error(s)",
                sheet=ctx.sheet_name,
                issues=problems,
            )
        if not sections:
            message = f"The sheet '{ctx.sheet_name}' does not contain any section"
            ctx.error(KIND_STRUCTURAL, "scan_sections", message)
            raise StructuralError(message, sheet=ctx.sheet_name)
        return sections

    def next_sub_section(self, ctx: SheetContext, start_row: int, section_end_row: int) -> tuple[int | None, int, str | None]:
        """Find the field starting at or after ``start_row`` inside a FieldSection.

        Returns ``(field_start_row, field_end_row, field_name)``.
        """
        field_start_row: int | None = None
        field_name: str | None = None
        row = start_row
        while row < section_end_row:
            if ctx.text(self.type_column, row) is not None:
                if field_start_row is not None:
                    return field_start_row, row, field_name
                field_start_row = row
                field_name = ctx.text(self.name_column, row)
                if field_name is None:
                    ctx.error(
                        KIND_VALIDATION,
                        "next_sub_section",
                        "No field name defined.",
                        row=row,
                        column=self.name_column,
                    )
                    field_name = self.next_field_name()
            row += 1
        return field_start_row, section_end_row, field_name

    def scan_sub_sections(self, ctx: SheetContext, section: Section) -> list[SubSection]:
        """Split a FieldSection into its fields; field names must be unique per section."""
        sub_sections: list[SubSection] = []
        names: set[str] = set()
        current = section.start_row + 1
        while current < section.end_row:
            start, end, field_name = self.next_sub_section(ctx, current, section.end_row)
            if start is None or field_name is None:
                ctx.error(
                    KIND_VALIDATION,
                    "scan_sub_sections",
                    f"The rows {current}-{section.end_row - 1} of section '{section.name}' do not belong to a field",
                    row=current,
                    column=self.type_column,
                )
                break
            if start > current:
                ctx.error(
                    KIND_VALIDATION,
                    "scan_sub_sections",
                    f"The rows {current}-{start - 1} of section '{section.name}' do not belong to a field",
                    row=current,
                    column=self.type_column,
                )

            if field_name in names:
                ctx.error(
                    KIND_VALIDATION,
                    "scan_sub_sections",
                    f"Double FieldSubSection name '{field_name}' in section '{section.name}' "
                    f"in table '{ctx.sheet_name}'",
                    row=start,
                    column=self.type_column,
                )
            else:
                names.add(field_name)

            sub_sections.append(SubSection(name=field_name, start_row=start, end_row=end, parent=section.name))
            current = end
        return sub_sections
