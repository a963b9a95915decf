from __future__ import annotations

from ..constants import RULE
from ..models.specification import EquivalenceClasses, ErrorClass, FieldRule, Specification, ValidClass

"""Equivalence classes of one specification field.

The built-in rules (PK, TYPE, C1..C5) produce fixed valid / error classes,
every other rule becomes an error class named after the rule and described by
its short description from the rule table.
"""

__all__ = [
    "STRING_VALID_CLASSES",
    "build_equivalence_classes",
]

# Extra valid classes of an unconstrained string field
STRING_VALID_CLASSES = ("naughty strings", "number", "float", "boolean")

# Text of the C2 / C3 error class and valid class comments per field type
_BOUNDARY_UNITS = {
    "string": " chars",
    "date": " date",
    "integer": "",
    "float": "",
}


def _add_boundaries(classes: EquivalenceClasses, field_rules: dict[str, FieldRule], unit: str) -> None:
    """Turn C2 / C3 into error classes and note the limits on every valid class."""
    minimum = field_rules.get("C2")
    if minimum is not None:
        classes.error["C2"] = ErrorClass(
            comment=[f"Fall below min {minimum.value}{unit}"],
            severity=[minimum.severity],
        )
        for valid in classes.valid.values():
            valid.comment.append(f"Min {minimum.value}{unit}")

    maximum = field_rules.get("C3")
    if maximum is not None:
        classes.error["C3"] = ErrorClass(
            comment=[f"Exceeds max {maximum.value}{unit}"],
            severity=[maximum.severity],
        )
        for valid in classes.valid.values():
            valid.comment.append(f"Max {maximum.value}{unit}")


def build_equivalence_classes(field_rules: dict[str, FieldRule], specification: Specification) -> EquivalenceClasses:
    """Derive the valid and error classes of one field.

    Args:
        field_rules: the field's rules keyed by upper-cased rule name
        specification: used to look up the description of custom rules

    Returns:
        EquivalenceClasses. Custom rules without an entry in the rule table are
        listed in ``unresolved`` and get no class.
    """
    classes = EquivalenceClasses(valid={"not null": ValidClass(comment=["Not Empty"])})

    mandatory = field_rules.get("C1")
    if mandatory is not None:
        classes.error["C1"] = ErrorClass(comment=["Mandatory Field"], severity=[mandatory.severity])
    else:
        # empty is also valid
        classes.valid["null"] = ValidClass(comment=["Empty"])

    if "C2" in field_rules:
        classes.valid["exactly min"] = ValidClass()
    if "C3" in field_rules:
        classes.valid["exactly max"] = ValidClass()

    email = field_rules.get("C4")
    if email is not None:
        classes.error["C4"] = ErrorClass(comment=["Must be valid email"], severity=[email.severity])
        classes.valid["not null"].comment.append("Valid Email")

    regex = field_rules.get("C5")
    if regex is not None:
        classes.error["C5"] = ErrorClass(comment=["Must match the given RegEx"], severity=[regex.severity])
        classes.valid["not null"].comment.append("Matches RegEx")

    field_type = field_rules.get("TYPE")
    if field_type is not None:
        lc_type = field_type.value.lower()
        if lc_type == "string" and email is None and regex is None:
            for name in STRING_VALID_CLASSES:
                classes.valid[name] = ValidClass(comment=[name])

        if lc_type in _BOUNDARY_UNITS:
            _add_boundaries(classes, field_rules, _BOUNDARY_UNITS[lc_type])
        elif lc_type == "boolean":
            classes.error["boolean"] = ErrorClass(comment=["Not a boolean value"], severity=[field_type.severity])

    # custom rules
    for rule_name, field_rule in field_rules.items():
        if rule_name in RULE:
            continue
        rule = specification.rule(rule_name)
        if rule is None:
            classes.unresolved.append(rule_name)
            continue
        classes.error[rule_name] = ErrorClass(comment=[rule.short_desc], severity=[field_rule.severity])

    return classes
