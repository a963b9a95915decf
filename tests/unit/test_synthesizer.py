from __future__ import annotations

from xlsx_tables.converter.synthesizer import synthesize_testcases
from xlsx_tables.models.specification import RowIdObject


def test_single_fault_scenario():
    field_a = RowIdObject(valid=["a1", "a2"], error=["ae1"])
    field_b = RowIdObject(valid=["b1"], error=["be1", "be2"])

    testcases = synthesize_testcases([field_a, field_b], RowIdObject())

    assert [tc.name for tc in testcases] == ["1", "2", "3"]
    assert testcases[0].data == {"ae1": "x", "be1": "e", "be2": "e", "b1": "a"}
    assert testcases[1].data == {"be1": "x", "a1": "a", "a2": "a"}
    assert testcases[2].data == {"be2": "x", "a1": "a", "a2": "a"}


def test_secondary_data_is_always_valid():
    field = RowIdObject(valid=["v"], error=["e1", "e2"])
    secondary = RowIdObject(valid=["exists", "new"])

    testcases = synthesize_testcases([field], secondary)

    assert len(testcases) == 2
    for tc in testcases:
        assert tc.data["exists"] == "a" and tc.data["new"] == "a"
        assert "v" not in tc.data


def test_testcase_count_is_sum_of_error_classes():
    objects = [RowIdObject(valid=["v"], error=[f"e{i}_{j}" for j in range(i)]) for i in range(4)]
    assert len(synthesize_testcases(objects)) == 0 + 1 + 2 + 3


def test_no_errors_no_testcases():
    assert synthesize_testcases([RowIdObject(valid=["v"])]) == []
