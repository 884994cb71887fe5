"""
Coercion of raw row values to the types of their fields.

Rows are edited in place. When a row carries a GeoJSON feature, every
coerced value is mirrored into the feature's ``properties`` so both views of
the attribute stay identical.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from geotabular.core.processors.field_types import FieldType
from geotabular.core.processors.sampler import not_null
from geotabular.core.processors.schema import Field

logger = logging.getLogger(__name__)

TRUE_STRINGS = ("true", "True", "TRUE", "1")
EPOCH_TIMESTAMP_FORMATS = ("x", "X")

_INT_PREFIX = re.compile(r"^\s*([-+]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?)")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_boolean(value: Any, field: Optional[Field] = None) -> bool:
    return value in TRUE_STRINGS


def parse_integer(value: Any, field: Optional[Field] = None) -> Optional[int]:
    """Parse the leading base-10 integer of ``value``; None when there is none."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else int(value)
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def parse_real(value: Any, field: Optional[Field] = None) -> float:
    """Parse ``value`` as a float; malformed values become NaN."""
    if _is_number(value):
        return float(value)
    text = str(value).strip()
    try:
        return float(text)
    except ValueError:
        match = _FLOAT_PREFIX.match(text)
        return float(match.group(1)) if match else math.nan


def parse_epoch(value: Any) -> Any:
    number = parse_real(value)
    if not math.isnan(number) and number.is_integer():
        return int(number)
    return number


def _timestamp_valid(value: Any, field: Field) -> bool:
    if field.format in EPOCH_TIMESTAMP_FORMATS:
        return _is_number(value)
    return isinstance(value, str)


def _timestamp_parse(value: Any, field: Field) -> Any:
    if field.format in EPOCH_TIMESTAMP_FORMATS:
        return parse_epoch(value)
    # Other formats are parsed downstream by their own format parser
    return value


@dataclass(frozen=True)
class FieldValueParser:
    """Checks whether a value is already coerced, and coerces it."""

    valid: Callable[[Any, Field], bool]
    parse: Callable[[Any, Field], Any]


FIELD_VALUE_PARSERS: Dict[FieldType, FieldValueParser] = {
    FieldType.BOOLEAN: FieldValueParser(
        valid=lambda d, f: isinstance(d, bool),
        parse=parse_boolean,
    ),
    FieldType.INTEGER: FieldValueParser(
        valid=lambda d, f: isinstance(d, int) and not isinstance(d, bool),
        parse=parse_integer,
    ),
    FieldType.REAL: FieldValueParser(
        valid=lambda d, f: _is_number(d),
        parse=parse_real,
    ),
    FieldType.TIMESTAMP: FieldValueParser(
        valid=_timestamp_valid,
        parse=_timestamp_parse,
    ),
}


def parse_csv_rows_by_field_type(
    rows: List[List[Any]], geo_field_idx: int, field: Field, i: int
) -> None:
    """Parse the values of column ``i`` in place according to ``field.type``.

    Only the first non-null value is inspected: if it is already of the
    target type the column is left alone.

    Args:
        rows: Row arrays to edit
        geo_field_idx: Index of the GeoJSON feature column, or -1
        field: Field describing column ``i``
        i: Column index
    """
    parser = FIELD_VALUE_PARSERS.get(field.type)
    if parser is None:
        return

    first = next((row for row in rows if not_null(row[i])), None)
    if first is None or parser.valid(first[i], field):
        return

    logger.debug(f"Coercing column '{field.name}' to {field.type.value}")
    for row in rows:
        if row[i] is None:
            continue
        row[i] = parser.parse(row[i], field)

        if geo_field_idx > -1:
            feature = row[geo_field_idx]
            if isinstance(feature, dict) and isinstance(feature.get("properties"), dict):
                feature["properties"][field.name] = row[i]


def parse_rows_by_fields(
    rows: List[List[Any]],
    fields: Sequence[Field],
    geojson_field_name: str = "_geojson",
) -> List[List[Any]]:
    """Parse rows by analyzed field types, so that ``'1'`` -> ``1`` and
    ``'True'`` -> ``True``. Rows are edited in place and returned.
    """
    geo_field_idx = next(
        (idx for idx, f in enumerate(fields) if f.name == geojson_field_name), -1
    )
    for i, field in enumerate(fields):
        parse_csv_rows_by_field_type(rows, geo_field_idx, field, i)

    return rows
