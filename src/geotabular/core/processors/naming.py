"""Duplicate field name resolution."""

import re
from dataclasses import dataclass, field
from typing import List, Sequence, Set


@dataclass
class RenamedFields:
    """Result of renaming: every assigned name plus the name per input index."""

    all_names: List[str] = field(default_factory=list)
    field_by_index: List[str] = field(default_factory=list)


def _collides(name: str, assigned: Set[str]) -> bool:
    if name in assigned:
        return True
    # An existing "name-0" style column claims the base name too
    family = re.compile(rf"{re.escape(name)}-\d+")
    return any(family.fullmatch(other) for other in assigned)


def rename_duplicate_fields(field_order: Sequence[str]) -> RenamedFields:
    """Rename duplicated names by appending ``-{counter}``.

    Names are processed left to right. A colliding name gets the smallest
    counter whose ``name-counter`` form is not assigned yet, so
    ``["a", "a", "a"]`` becomes ``["a", "a-0", "a-1"]`` and
    ``["a-0", "a"]`` becomes ``["a-0", "a-1"]``.
    """
    result = RenamedFields()
    assigned: Set[str] = set()

    for name in map(str, field_order):
        field_name = name
        if _collides(name, assigned):
            counter = 0
            while f"{name}-{counter}" in assigned:
                counter += 1
            field_name = f"{name}-{counter}"

        result.field_by_index.append(field_name)
        result.all_names.append(field_name)
        assigned.add(field_name)

    return result
