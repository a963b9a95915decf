"""Domain models for the spreadsheet table importer.

This package contains the table model built by the parsers, the specification
model, the diagnostic record and the configuration / processing result models.
"""

from .config_models import ImporterConfig, SheetDefinition
from .decision_table import SectionType, TableDecision, Testcase
from .diagnostic import Diagnostic
from .specification import EquivalenceClasses, RowIdObject, Specification

__all__ = [
    # Configuration models
    "ImporterConfig",
    "SheetDefinition",
    # Table models
    "SectionType",
    "TableDecision",
    "Testcase",
    "Specification",
    "EquivalenceClasses",
    "RowIdObject",
    # Diagnostics
    "Diagnostic",
]
