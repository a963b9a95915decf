from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..constants import KEY_PRIMARY_KEY_RULE
from ..models.decision_table import FieldSection, TableDecision
from ..models.diagnostic import KIND_CONVERSION
from ..models.specification import EquivalenceClasses, RowIdObject, Specification
from .equivalence import build_equivalence_classes
from .synthesizer import synthesize_testcases

if TYPE_CHECKING:
    from ..parser.base import SheetContext

__all__ = [
    "SpecificationConverter",
]

logger = logging.getLogger(__name__)


class SpecificationConverter:
    """Converts a parsed specification into a decision table.

    Layout of the created table:

    - MultiRow ``Execute``: rows ``Testcase`` / ``Data only``
    - Field ``Secondary Data``: only when the rule ``PK`` is defined
    - Field ``Primary Data``: one field per specification field, one row per
      equivalence class (``"valid <class>"`` / ``"error <class>"``)
    - Summary ``Summary``
    - MultiRow ``Severity``: one row per severity
    - one single-fault test case per error class
    """

    def convert(self, specification: Specification, ctx: SheetContext | None = None, file_name: str = "") -> TableDecision:
        table = TableDecision(table_name=specification.name, file_name=file_name)

        self.create_execution_multi_row_section(table)
        secondary = self.create_secondary_data_section(specification, table)
        row_id_objects = self.create_primary_data_section(specification, table, ctx)
        table.add_new_summary_section("Summary")
        self.create_severity_section(specification, table)

        for synthesized in synthesize_testcases(row_id_objects, secondary):
            testcase = table.add_new_testcase(synthesized.name)
            testcase.data.update(synthesized.data)

        logger.info(
            f"Converted specification '{specification.name}': "
            f"{len(row_id_objects)} fields, {len(table.testcase_order)} testcases"
        )
        return table

    def create_execution_multi_row_section(self, table: TableDecision) -> None:
        """Rows deciding whether a test case is executed or only provides data."""
        section = table.add_new_multi_row_section("Execute")

        row_id_exe = section.create_new_row()
        section.keys[row_id_exe] = "Testcase"
        section.comments[row_id_exe] = "This is a testcase which should be executed"

        row_id_data = section.create_new_row()
        section.keys[row_id_data] = "Data only"
        section.comments[row_id_data] = "This is only data referenced from other testcases"

    def create_secondary_data_section(self, specification: Specification, table: TableDecision) -> RowIdObject:
        row_id_obj = RowIdObject()
        if specification.rule(KEY_PRIMARY_KEY_RULE) is None:
            return row_id_obj

        section = table.add_new_field_section("Secondary Data")
        record = section.create_new_field(specification.name)

        row_id_exist = record.create_new_row()
        record.equivalence_classes[row_id_exist] = "Record already exists"
        record.comments[row_id_exist] = "There is already a record with the same primary key"

        row_id_new = record.create_new_row()
        record.equivalence_classes[row_id_new] = "Record is new"
        record.comments[row_id_new] = "There is no record with this primary key"

        row_id_obj.valid.extend([row_id_exist, row_id_new])
        return row_id_obj

    def create_primary_data_section(
        self, specification: Specification, table: TableDecision, ctx: SheetContext | None = None
    ) -> list[RowIdObject]:
        section = table.add_new_field_section("Primary Data")
        row_id_objects: list[RowIdObject] = []

        for field_name in specification.field_order:
            spec_field = specification.fields[field_name]
            classes = build_equivalence_classes(spec_field.rules_by_name(), specification)
            for rule_name in classes.unresolved:
                message = (
                    f"The rule '{rule_name}' of the field '{field_name}' is not defined in the rule "
                    f"section, no equivalence class created"
                )
                if ctx is not None:
                    ctx.error(KIND_CONVERSION, "create_primary_data_section", message)
                else:
                    logger.error(message)
            row_id_objects.append(self.create_field_sub_section(section, field_name, classes))
        return row_id_objects

    def create_field_sub_section(self, section: FieldSection, field_name: str, classes: EquivalenceClasses) -> RowIdObject:
        """One field with a row per class; returns the row ids by class kind."""
        sub_section = section.create_new_field(field_name)
        row_id_obj = RowIdObject()

        for class_name, valid in classes.valid.items():
            row_id = sub_section.create_new_row()
            sub_section.equivalence_classes[row_id] = f"valid {class_name}"
            sub_section.comments[row_id] = ", ".join(valid.comment)
            row_id_obj.valid.append(row_id)

        for class_name, error in classes.error.items():
            row_id = sub_section.create_new_row()
            sub_section.equivalence_classes[row_id] = f"error {class_name}"
            sub_section.comments[row_id] = ", ".join(error.comment)
            row_id_obj.error.append(row_id)

        return row_id_obj

    def create_severity_section(self, specification: Specification, table: TableDecision) -> None:
        section = table.add_new_multi_row_section("Severity")
        for name in specification.severities:
            row_id = section.create_new_row()
            section.keys[row_id] = name
