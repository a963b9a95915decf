from __future__ import annotations

from dataclasses import dataclass, field

"""Specification table model and the intermediate structures of its conversion.

A specification sheet declares fields (one per row), the rules applying to each
field (one rule per column), the severity of each rule column and the rule
descriptions. The converter turns it into per-field equivalence classes.
"""

__all__ = [
    "FieldRule",
    "SpecificationField",
    "SpecificationRule",
    "Specification",
    "ValidClass",
    "ErrorClass",
    "EquivalenceClasses",
    "RowIdObject",
]


@dataclass(frozen=True)
class FieldRule:
    """A rule applied to one field: rule column name, cell value, column severity."""
    rule_name: str
    value: str
    severity: str


@dataclass
class SpecificationField:
    name: str  # display name (column S)
    internal_name: str  # column S+1
    rules: list[FieldRule] = field(default_factory=list)

    def rules_by_name(self) -> dict[str, FieldRule]:
        """Rules keyed by upper-cased rule name. Later columns win on collisions."""
        return {rule.rule_name.upper(): rule for rule in self.rules}


@dataclass(frozen=True)
class SpecificationRule:
    name: str
    short_desc: str
    long_desc: str | None = None


@dataclass
class Specification:
    name: str
    field_order: list[str] = field(default_factory=list)
    fields: dict[str, SpecificationField] = field(default_factory=dict)
    severities: list[str] = field(default_factory=list)  # declaration order
    rules: dict[str, SpecificationRule] = field(default_factory=dict)

    def rule(self, name: str) -> SpecificationRule | None:
        """Rule lookup by exact name, then case-insensitive."""
        if name in self.rules:
            return self.rules[name]
        upper = name.upper()
        for rule_name, rule in self.rules.items():
            if rule_name.upper() == upper:
                return rule
        return None


@dataclass
class ValidClass:
    comment: list[str] = field(default_factory=list)


@dataclass
class ErrorClass:
    comment: list[str] = field(default_factory=list)
    severity: list[str] = field(default_factory=list)


@dataclass
class EquivalenceClasses:
    """Valid and error equivalence classes of one field (insertion ordered)."""
    valid: dict[str, ValidClass] = field(default_factory=dict)
    error: dict[str, ErrorClass] = field(default_factory=dict)
    # custom rules whose description could not be found in the rule table
    unresolved: list[str] = field(default_factory=list)


@dataclass
class RowIdObject:
    """Row ids created in the decision table for one field's classes."""
    valid: list[str] = field(default_factory=list)
    error: list[str] = field(default_factory=list)
