from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

"""Decision table model.

The model is built by the parsers through a small builder API:

- ``TableDecision.add_new_<kind>_section(name)`` creates a section
- ``section.create_new_row()`` mints an opaque row id and the per-kind maps
  (``keys``, ``comments``, ``equivalence_classes`` ...) are keyed by that id
- ``FieldSection.create_new_field(name)`` nests the same row API one level down
- ``TableDecision.add_new_testcase(name)`` creates a test case column whose
  ``data`` maps row ids to the cell marks

Execute / NeverExecute / Multiplicity sections may exist at most once per table
and are reachable through ``single_check``.
"""

__all__ = [
    "SectionType",
    "SectionDefinition",
    "MultiRowSection",
    "TagSection",
    "FilterSection",
    "GeneratorSwitchSection",
    "SummarySection",
    "ExecuteSection",
    "NeverExecuteSection",
    "MultiplicitySection",
    "FieldSection",
    "FieldSubSection",
    "Testcase",
    "TableDecision",
]


class SectionType(str, Enum):
    """Section type codes as written in the type column of a decision sheet."""
    MULTI_ROW = "MultiRowSection"
    SUMMARY = "SummarySection"
    MULTIPLICITY = "MultiplicitySection"
    EXECUTE = "ExecuteSection"
    NEVER_EXECUTE = "NeverExecuteSection"
    TAG = "TagSection"
    FILTER = "FilterSection"
    GENERATOR_SWITCH = "GeneratorSwitchSection"
    FIELD = "FieldSection"
    FIELD_SUB = "FieldSubSection"

    @classmethod
    def from_code(cls, code: str) -> SectionType | None:
        for member in cls:
            if member.value == code:
                return member
        return None


# Sections which may only exist once in a table
SINGLE_SECTION_TYPES = frozenset(
    {SectionType.EXECUTE, SectionType.NEVER_EXECUTE, SectionType.MULTIPLICITY}
)


def new_row_id() -> str:
    return uuid.uuid4().hex


@dataclass
class SectionDefinition:
    """Common part of all sections: a header row id and ordered data rows."""
    name: str
    section_type: SectionType = SectionType.MULTI_ROW
    header_row: str = field(default_factory=new_row_id)
    data_rows: list[str] = field(default_factory=list)
    comments: dict[str, str] = field(default_factory=dict)

    def create_new_row(self) -> str:
        row_id = new_row_id()
        self.data_rows.append(row_id)
        return row_id


@dataclass
class MultiRowSection(SectionDefinition):
    section_type: SectionType = SectionType.MULTI_ROW
    keys: dict[str, str] = field(default_factory=dict)
    others: dict[str, str] = field(default_factory=dict)


@dataclass
class TagSection(SectionDefinition):
    section_type: SectionType = SectionType.TAG
    tags: dict[str, str] = field(default_factory=dict)
    others: dict[str, str] = field(default_factory=dict)


@dataclass
class FilterSection(SectionDefinition):
    section_type: SectionType = SectionType.FILTER
    filter_processor_names: dict[str, str] = field(default_factory=dict)
    expressions: dict[str, str] = field(default_factory=dict)


@dataclass
class GeneratorSwitchSection(SectionDefinition):
    section_type: SectionType = SectionType.GENERATOR_SWITCH
    generator_names: dict[str, str] = field(default_factory=dict)
    values: dict[str, str] = field(default_factory=dict)


@dataclass
class SummarySection(SectionDefinition):
    section_type: SectionType = SectionType.SUMMARY


@dataclass
class ExecuteSection(SectionDefinition):
    section_type: SectionType = SectionType.EXECUTE


@dataclass
class NeverExecuteSection(SectionDefinition):
    section_type: SectionType = SectionType.NEVER_EXECUTE


@dataclass
class MultiplicitySection(SectionDefinition):
    section_type: SectionType = SectionType.MULTIPLICITY


@dataclass
class FieldSubSection(SectionDefinition):
    """One field of a FieldSection. ``header_row`` is the row id in the parent."""
    section_type: SectionType = SectionType.FIELD_SUB
    parent: str | None = None
    equivalence_classes: dict[str, str] = field(default_factory=dict)
    tdgs: dict[str, str] = field(default_factory=dict)


@dataclass
class FieldSection(SectionDefinition):
    section_type: SectionType = SectionType.FIELD
    sub_sections: dict[str, FieldSubSection] = field(default_factory=dict)

    def create_new_field(self, name: str) -> FieldSubSection:
        row_id = self.create_new_row()
        sub_section = FieldSubSection(name=name, header_row=row_id, parent=self.header_row)
        self.sub_sections[row_id] = sub_section
        return sub_section

    @property
    def fields(self) -> list[FieldSubSection]:
        return [self.sub_sections[row_id] for row_id in self.data_rows]


@dataclass
class Testcase:
    """One test case column. ``data`` maps row ids to marks ('x', 'e', 'a' ...)."""
    id: str
    name: str
    data: dict[str, str] = field(default_factory=dict)
    execute: bool = True
    never_execute: bool = False
    multiplicity: int = 1

    def set_value(self, row_id: str, value: str | None) -> None:
        # 未設定セルは保持しない (don't care)
        if value is None:
            self.data.pop(row_id, None)
        else:
            self.data[row_id] = value


@dataclass
class TableDecision:
    """A decision table built from one sheet (or converted from a specification)."""
    table_name: str
    file_name: str = ""
    sections: dict[str, SectionDefinition] = field(default_factory=dict)
    section_order: list[str] = field(default_factory=list)
    testcases: dict[str, Testcase] = field(default_factory=dict)
    testcase_order: list[str] = field(default_factory=list)
    single_check: dict[SectionType, SectionDefinition] = field(default_factory=dict)

    def _add_section(self, section: SectionDefinition) -> SectionDefinition:
        if section.section_type in SINGLE_SECTION_TYPES:
            if section.section_type in self.single_check:
                raise ValueError(
                    f"table '{self.table_name}' already has a {section.section_type.value}"
                )
            self.single_check[section.section_type] = section
        self.sections[section.header_row] = section
        self.section_order.append(section.header_row)
        return section

    def add_new_multi_row_section(self, name: str) -> MultiRowSection:
        return self._add_section(MultiRowSection(name=name))  # type: ignore[return-value]

    def add_new_tag_section(self, name: str) -> TagSection:
        return self._add_section(TagSection(name=name))  # type: ignore[return-value]

    def add_new_filter_section(self, name: str) -> FilterSection:
        return self._add_section(FilterSection(name=name))  # type: ignore[return-value]

    def add_new_generator_switch_section(self, name: str) -> GeneratorSwitchSection:
        return self._add_section(GeneratorSwitchSection(name=name))  # type: ignore[return-value]

    def add_new_summary_section(self, name: str) -> SummarySection:
        return self._add_section(SummarySection(name=name))  # type: ignore[return-value]

    def add_new_execute_section(self, name: str) -> ExecuteSection:
        return self._add_section(ExecuteSection(name=name))  # type: ignore[return-value]

    def add_new_never_execute_section(self, name: str) -> NeverExecuteSection:
        return self._add_section(NeverExecuteSection(name=name))  # type: ignore[return-value]

    def add_new_multiplicity_section(self, name: str) -> MultiplicitySection:
        return self._add_section(MultiplicitySection(name=name))  # type: ignore[return-value]

    def add_new_field_section(self, name: str) -> FieldSection:
        return self._add_section(FieldSection(name=name))  # type: ignore[return-value]

    def add_new_testcase(self, name: str) -> Testcase:
        testcase = Testcase(id=new_row_id(), name=name)
        self.testcases[testcase.id] = testcase
        self.testcase_order.append(testcase.id)
        return testcase

    @property
    def ordered_sections(self) -> list[SectionDefinition]:
        return [self.sections[section_id] for section_id in self.section_order]

    @property
    def ordered_testcases(self) -> list[Testcase]:
        return [self.testcases[tc_id] for tc_id in self.testcase_order]

    def get_section(self, name: str) -> SectionDefinition | None:
        for section in self.ordered_sections:
            if section.name == name:
                return section
        return None
