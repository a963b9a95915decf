from __future__ import annotations

import pytest

from xlsx_tables.parser.values import get_boolean, get_multiplicity_from_value


@pytest.mark.parametrize("value", ["t", "T", "y", "j", "YES", "1", "ok", "Ja", "si", "true", "TRUE"])
def test_get_boolean_true_tokens(value):
    assert get_boolean(value) is True


@pytest.mark.parametrize("value", ["2", "no", "", None, " ", "x", "truely", "yess", "0"])
def test_get_boolean_false(value):
    assert get_boolean(value) is False


def test_get_boolean_numbers_and_bools():
    assert get_boolean(1) is True
    assert get_boolean(3.5) is True
    assert get_boolean(0) is False
    assert get_boolean(True) is True
    assert get_boolean(False) is False


@pytest.mark.parametrize(
    "value, expected",
    [
        ("4", 4),
        ("  3", 3),
        ("3.45", 3),
        ("", 1),
        (None, 1),
        ("dd3", 1),
        ("-3", 1),
        ("0", 1),
        (7, 7),
        (2.9, 2),
        (-1, 1),
    ],
)
def test_get_multiplicity_from_value(value, expected):
    assert get_multiplicity_from_value(value) == expected
