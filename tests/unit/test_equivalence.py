from __future__ import annotations

from xlsx_tables.converter.equivalence import build_equivalence_classes
from xlsx_tables.models.specification import FieldRule, Specification, SpecificationRule


def _rules(*items):
    """(rule_name, value, severity) tuples -> rules keyed by upper-cased name."""
    return {name.upper(): FieldRule(rule_name=name, value=value, severity=severity) for name, value, severity in items}


def _spec(**rules):
    return Specification(
        name="Spec",
        rules={name: SpecificationRule(name=name, short_desc=desc) for name, desc in rules.items()},
    )


def _comments(classes, kind):
    return {name: c.comment for name, c in getattr(classes, kind).items()}


def test_baseline_without_rules():
    classes = build_equivalence_classes({}, _spec())
    assert _comments(classes, "valid") == {"not null": ["Not Empty"], "null": ["Empty"]}
    assert classes.error == {}


def test_mandatory_replaces_null_class():
    classes = build_equivalence_classes(_rules(("C1", "x", "Abort")), _spec())
    assert list(classes.valid) == ["not null"]
    assert classes.error["C1"].comment == ["Mandatory Field"]
    assert classes.error["C1"].severity == ["Abort"]


def test_email_and_regex():
    classes = build_equivalence_classes(
        _rules(("C4", "x", "Warning"), ("C5", "^[a-z]+$", "Abort"), ("TYPE", "String", "Abort")),
        _spec(),
    )
    assert classes.valid["not null"].comment == ["Not Empty", "Valid Email", "Matches RegEx"]
    assert classes.error["C4"].comment == ["Must be valid email"]
    assert classes.error["C5"].comment == ["Must match the given RegEx"]
    assert classes.error["C5"].severity == ["Abort"]
    # constrained strings get no extra valid classes
    assert list(classes.valid) == ["not null", "null"]


def test_string_type_with_limits():
    classes = build_equivalence_classes(
        _rules(("TYPE", "string", "Abort"), ("C1", "x", "Abort"), ("C2", "2", "Warning"), ("C3", "20", "Warning")),
        _spec(),
    )
    assert list(classes.valid) == [
        "not null",
        "exactly min",
        "exactly max",
        "naughty strings",
        "number",
        "float",
        "boolean",
    ]
    assert classes.valid["not null"].comment == ["Not Empty", "Min 2 chars", "Max 20 chars"]
    assert classes.valid["exactly min"].comment == ["Min 2 chars", "Max 20 chars"]
    assert classes.valid["number"].comment == ["number", "Min 2 chars", "Max 20 chars"]
    assert list(classes.error) == ["C1", "C2", "C3"]
    assert classes.error["C2"].comment == ["Fall below min 2 chars"]
    assert classes.error["C3"].comment == ["Exceeds max 20 chars"]
    assert classes.error["C3"].severity == ["Warning"]


def test_date_and_number_types():
    date = build_equivalence_classes(_rules(("TYPE", "Date", "Abort"), ("C2", "2020-01-01", "Abort")), _spec())
    assert date.error["C2"].comment == ["Fall below min 2020-01-01 date"]
    assert date.valid["null"].comment == ["Empty", "Min 2020-01-01 date"]

    number = build_equivalence_classes(_rules(("TYPE", "float", "Abort"), ("C3", "9.5", "Info")), _spec())
    assert number.error["C3"].comment == ["Exceeds max 9.5"]
    assert number.error["C3"].severity == ["Info"]
    assert number.valid["exactly max"].comment == ["Max 9.5"]


def test_limits_without_type_only_add_boundaries():
    classes = build_equivalence_classes(_rules(("C2", "1", "Abort"), ("C3", "5", "Abort")), _spec())
    assert list(classes.valid) == ["not null", "null", "exactly min", "exactly max"]
    assert classes.error == {}


def test_boolean_type_uses_type_severity():
    classes = build_equivalence_classes(_rules(("TYPE", "BOOLEAN", "Warning")), _spec())
    assert classes.error["boolean"].comment == ["Not a boolean value"]
    assert classes.error["boolean"].severity == ["Warning"]


def test_custom_rules():
    classes = build_equivalence_classes(
        _rules(("chk", "x", "Abort"), ("MISSING", "x", "Abort")),
        _spec(CHK="Checksum must match"),
    )
    assert classes.error["CHK"].comment == ["Checksum must match"]
    assert classes.error["CHK"].severity == ["Abort"]
    assert "MISSING" not in classes.error
    assert classes.unresolved == ["MISSING"]
