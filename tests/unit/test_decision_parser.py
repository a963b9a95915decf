from __future__ import annotations

import pytest

from xlsx_tables.models.decision_table import SectionType
from xlsx_tables.parser.decision import DecisionParser, RowEntry
from xlsx_tables.parser.errors import SectionTypeError, StructuralError


def test_parse_reads_testcases(decision_grid):
    result = DecisionParser().parse(decision_grid, "Decision")
    table = result.table

    assert table.table_name == "Decision"
    assert table.file_name == "test.xlsx"
    assert [tc.name for tc in table.ordered_testcases] == ["tc1", "tc2", "tc3"]
    assert result.diagnostics == []
    assert result.has_errors is False


def test_parse_creates_sections_in_sheet_order(decision_grid):
    table = DecisionParser().parse(decision_grid, "Decision").table
    assert [(s.name, s.section_type) for s in table.ordered_sections] == [
        ("Execute", SectionType.EXECUTE),
        ("Never", SectionType.NEVER_EXECUTE),
        ("Multiplicity", SectionType.MULTIPLICITY),
        ("Person", SectionType.FIELD),
        ("Tags", SectionType.TAG),
        ("Filter", SectionType.FILTER),
        ("Generator", SectionType.GENERATOR_SWITCH),
        ("Result", SectionType.MULTI_ROW),
        ("Summary", SectionType.SUMMARY),
    ]
    assert set(table.single_check) == {SectionType.EXECUTE, SectionType.NEVER_EXECUTE, SectionType.MULTIPLICITY}


def test_post_passes_set_execute_never_execute_multiplicity(decision_grid):
    table = DecisionParser().parse(decision_grid, "Decision").table
    tc1, tc2, tc3 = table.ordered_testcases

    assert (tc1.execute, tc2.execute, tc3.execute) == (True, False, True)
    assert (tc1.never_execute, tc2.never_execute, tc3.never_execute) == (False, True, False)
    assert (tc1.multiplicity, tc2.multiplicity, tc3.multiplicity) == (3, 1, 1)

    execute = table.single_check[SectionType.EXECUTE]
    assert tc1.data[execute.header_row] == "yes"
    assert execute.header_row not in tc2.data


def test_field_section_rows(decision_grid):
    table = DecisionParser().parse(decision_grid, "Decision").table
    person = table.get_section("Person")
    first, last = person.fields

    assert first.name == "first name"
    assert first.parent == person.header_row
    valid_row, invalid_row = first.data_rows
    assert first.equivalence_classes[valid_row] == "valid"
    assert first.tdgs[valid_row] == "gen:name"
    assert first.comments[valid_row] == "a valid name"
    assert first.equivalence_classes[invalid_row] == "invalid"
    assert invalid_row not in first.tdgs

    tc1, tc2, tc3 = table.ordered_testcases
    assert tc1.data[valid_row] == "x"
    assert valid_row not in tc2.data
    assert tc2.data[invalid_row] == "x" and tc3.data[invalid_row] == "x"

    assert last.name == "last name"
    assert len(last.data_rows) == 1


def test_multi_row_like_sections(decision_grid):
    table = DecisionParser().parse(decision_grid, "Decision").table
    tc1, tc2, _ = table.ordered_testcases

    tags = table.get_section("Tags")
    (row,) = tags.data_rows
    assert (tags.tags[row], tags.others[row], tags.comments[row]) == ("smoke", "other tag", "tag comment")
    assert tc1.data[row] == "x"

    filters = table.get_section("Filter")
    (row,) = filters.data_rows
    assert filters.filter_processor_names[row] == "filterProc"
    assert filters.expressions[row] == "a > 1"
    assert row not in filters.comments
    assert tc1.data[row] == "a"

    generator = table.get_section("Generator")
    (row,) = generator.data_rows
    assert (generator.generator_names[row], generator.values[row]) == ("gen", "off")
    assert tc2.data[row] == "x"

    result = table.get_section("Result")
    (row,) = result.data_rows
    assert (result.keys[row], result.others[row], result.comments[row]) == ("OK", "other", "all good")

    assert table.get_section("Summary").data_rows == []


def test_defaults_without_singleton_sections(make_grid):
    rows = [
        ["<DECISION_TABLE>", None, None, None, None, "a", "b"],
        ["Result", "MultiRowSection"],
        [None, None, "OK", None, None, "x", None],
        ["<END>"],
    ]
    table = DecisionParser().parse(make_grid({"D": rows}), "D").table
    for tc in table.ordered_testcases:
        assert (tc.execute, tc.never_execute, tc.multiplicity) == (True, False, 1)


def test_synthetic_field_names_are_instance_scoped(make_grid):
    rows = [
        ["<DECISION_TABLE>", None, None, None, None, "tc1"],
        ["Person", "FieldSection"],
        [None, "FieldSubSection"],
        [None, None, "valid", None, None, "x"],
        ["<END>"],
    ]
    grid = make_grid({"A": rows, "B": rows})
    parser = DecisionParser()
    first = parser.parse(grid, "A")
    second = parser.parse(grid, "B")

    assert first.table.get_section("Person").fields[0].name == "__Field_1"
    assert second.table.get_section("Person").fields[0].name == "__Field_2"
    assert first.has_errors and second.has_errors
    assert DecisionParser().parse(grid, "A").table.get_section("Person").fields[0].name == "__Field_1"


def test_section_type_error_aborts_parse(make_grid):
    rows = [
        ["<DECISION_TABLE>", None, None, None, None, "tc1"],
        ["Bad", "Unknown"],
        ["<END>"],
    ]
    with pytest.raises(SectionTypeError):
        DecisionParser().parse(make_grid({"D": rows}), "D")


def test_missing_end_key_aborts_parse(make_grid):
    rows = [
        ["<DECISION_TABLE>", None, None, None, None, "tc1"],
        ["Result", "MultiRowSection"],
    ]
    with pytest.raises(StructuralError):
        DecisionParser(max_empty_rows=10).parse(make_grid({"D": rows}), "D")


def test_shifted_start_cell(make_grid):
    rows = [
        [None],
        [None, "<DECISION_TABLE>", None, None, None, None, "only"],
        [None, "Result", "MultiRowSection"],
        [None, None, None, "OK", None, None, "x"],
        [None, "<END>"],
    ]
    table = DecisionParser(start_row=1, start_column=1).parse(make_grid({"D": rows}), "D").table
    result = table.get_section("Result")
    (row,) = result.data_rows
    assert result.keys[row] == "OK"
    assert table.ordered_testcases[0].data[row] == "x"


def test_read_rows_returns_row_entries(decision_grid):
    parser = DecisionParser()
    ctx = parser.context(decision_grid, "Decision")
    rows = parser.read_rows(ctx, 17, 18, 3, ("keys", "others", "comments"))
    assert rows == [RowEntry(payload={"keys": "OK", "others": "other", "comments": "all good"}, values=["x", None, None])]
