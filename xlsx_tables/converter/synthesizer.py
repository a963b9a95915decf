from __future__ import annotations

from dataclasses import dataclass, field

from ..models.specification import RowIdObject

"""Single-fault test case synthesis.

Every error class of every field yields one test case in which that class is
triggered ('x') while the other fields hold a valid value ('a') or an inert
error marker ('e'):

- fields after the faulty one: error rows 'e', valid rows 'a'
- fields before the faulty one: valid rows 'a', error rows unset
- secondary data: valid rows 'a'

Unset rows mean "don't care".
"""

__all__ = [
    "MARK_TRIGGER",
    "MARK_INERT",
    "MARK_ANY",
    "SynthesizedTestcase",
    "synthesize_testcases",
]

MARK_TRIGGER = "x"
MARK_INERT = "e"
MARK_ANY = "a"


@dataclass
class SynthesizedTestcase:
    name: str
    data: dict[str, str] = field(default_factory=dict)


def synthesize_testcases(
    row_id_objects: list[RowIdObject], secondary: RowIdObject | None = None
) -> list[SynthesizedTestcase]:
    """Create the test cases, named '1', '2', ... in field / error row order."""
    testcases: list[SynthesizedTestcase] = []
    secondary_valid = secondary.valid if secondary is not None else []

    for i, main_object in enumerate(row_id_objects):
        for row_id in main_object.error:
            tc = SynthesizedTestcase(name=str(len(testcases) + 1))
            tc.data[row_id] = MARK_TRIGGER

            for next_object in row_id_objects[i + 1:]:
                for next_row_id in next_object.error:
                    tc.data[next_row_id] = MARK_INERT
                for next_row_id in next_object.valid:
                    tc.data[next_row_id] = MARK_ANY

            for prev_object in row_id_objects[:i]:
                for prev_row_id in prev_object.valid:
                    tc.data[prev_row_id] = MARK_ANY

            for sec_row_id in secondary_valid:
                tc.data[sec_row_id] = MARK_ANY

            testcases.append(tc)
    return testcases
