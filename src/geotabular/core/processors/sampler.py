"""
Sampling of column values for type inference.

Type detection never scans a whole column: a bounded, null-skipping sample
of each field is handed to the classifier instead.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from geotabular.common.config import CSV_NULLS

logger = logging.getLogger(__name__)

Sample = Dict[str, List[Any]]


def not_null(value: Any) -> bool:
    return value is not None


def cell_at(row: Sequence[Any], index: int) -> Any:
    """Value of ``row`` at ``index``, or None when the row is too short."""
    if row is None or index >= len(row):
        return None
    return row[index]


def clean_up_falsy_values(
    rows: List[List[Any]], null_tokens: Optional[Iterable[str]] = None
) -> None:
    """Replace null-like strings with None, in place.

    A column holding ``''`` or ``'NULL'`` next to numbers would otherwise be
    classified as string.
    """
    tokens = set(CSV_NULLS if null_tokens is None else null_tokens)
    replaced = 0
    for row in rows:
        for j, value in enumerate(row):
            if isinstance(value, str) and value in tokens:
                row[j] = None
                replaced += 1
    if replaced:
        logger.debug(f"Replaced {replaced} null-like values with None")


def get_sample_for_type_analyze(
    fields: Sequence[str], rows: Sequence[Sequence[Any]], sample_count: int = 50
) -> Sample:
    """Collect up to ``sample_count`` non-null values per field.

    Args:
        fields: Field names in column order
        rows: Row arrays aligned with ``fields``
        sample_count: Number of values returned for every field

    Returns:
        Mapping from field name to exactly ``sample_count`` values. Strings
        are trimmed; once a column runs out of values the remaining slots
        hold None. When a name repeats, the later column wins.
    """
    sample: Sample = {}
    for field_idx, field in enumerate(fields):
        values: List[Any] = []
        for row in rows:
            if len(values) >= sample_count:
                break
            value = cell_at(row, field_idx)
            if not_null(value):
                values.append(value.strip() if isinstance(value, str) else value)

        values.extend([None] * (sample_count - len(values)))
        sample[field] = values

    return sample


def find_non_empty_rows_at_field(
    rows: Sequence[Sequence[Any]], field_idx: int, total: int
) -> List[Sequence[Any]]:
    """Return the first ``total`` rows holding a value at ``field_idx``."""
    found = []
    for row in rows:
        if len(found) >= total:
            break
        if not_null(cell_at(row, field_idx)):
            found.append(row)
    return found
