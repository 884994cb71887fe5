"""
Field type vocabulary and the mapping from classifier categories to it.
"""

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Closed set of types a normalized field can carry."""

    STRING = "string"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    DATE = "date"
    TIMESTAMP = "timestamp"
    GEOJSON = "geojson"

    @classmethod
    def has_value(cls, value) -> bool:
        return isinstance(value, str) and value in cls._value2member_map_


class AnalyzerType(str, Enum):
    """Column categories the type classifier can emit."""

    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"
    NUMBER = "NUMBER"
    INT = "INT"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    GEOMETRY = "GEOMETRY"
    GEOMETRY_FROM_STRING = "GEOMETRY_FROM_STRING"
    PAIR_GEOMETRY_FROM_STRING = "PAIR_GEOMETRY_FROM_STRING"
    ZIPCODE = "ZIPCODE"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"
    CURRENCY = "CURRENCY"
    PERCENT = "PERCENT"
    NONE = "NONE"


ACCEPTED_ANALYZER_TYPES = [
    AnalyzerType.DATE,
    AnalyzerType.TIME,
    AnalyzerType.DATETIME,
    AnalyzerType.NUMBER,
    AnalyzerType.INT,
    AnalyzerType.FLOAT,
    AnalyzerType.BOOLEAN,
    AnalyzerType.STRING,
    AnalyzerType.GEOMETRY,
    AnalyzerType.GEOMETRY_FROM_STRING,
    AnalyzerType.PAIR_GEOMETRY_FROM_STRING,
    AnalyzerType.ZIPCODE,
    AnalyzerType.ARRAY,
    AnalyzerType.OBJECT,
]

IGNORED_ANALYZER_TYPES = [t for t in AnalyzerType if t not in ACCEPTED_ANALYZER_TYPES]

# Category reported alongside each type
ANALYZER_CATEGORIES = {
    AnalyzerType.DATE: "TIME",
    AnalyzerType.TIME: "TIME",
    AnalyzerType.DATETIME: "TIME",
    AnalyzerType.NUMBER: "NUMBER",
    AnalyzerType.INT: "NUMBER",
    AnalyzerType.FLOAT: "NUMBER",
    AnalyzerType.CURRENCY: "NUMBER",
    AnalyzerType.PERCENT: "NUMBER",
    AnalyzerType.BOOLEAN: "BOOLEAN",
    AnalyzerType.STRING: "STRING",
    AnalyzerType.ZIPCODE: "STRING",
    AnalyzerType.NONE: "STRING",
    AnalyzerType.GEOMETRY: "GEOMETRY",
    AnalyzerType.GEOMETRY_FROM_STRING: "GEOMETRY",
    AnalyzerType.PAIR_GEOMETRY_FROM_STRING: "GEOMETRY",
    AnalyzerType.ARRAY: "OBJECT",
    AnalyzerType.OBJECT: "OBJECT",
}

ANALYZER_TO_FIELD_TYPE = {
    AnalyzerType.DATE: FieldType.DATE,
    AnalyzerType.TIME: FieldType.TIMESTAMP,
    AnalyzerType.DATETIME: FieldType.TIMESTAMP,
    AnalyzerType.FLOAT: FieldType.REAL,
    AnalyzerType.INT: FieldType.INTEGER,
    AnalyzerType.BOOLEAN: FieldType.BOOLEAN,
    # TODO: give arrays and plain objects their own field type instead of geojson
    AnalyzerType.GEOMETRY: FieldType.GEOJSON,
    AnalyzerType.GEOMETRY_FROM_STRING: FieldType.GEOJSON,
    AnalyzerType.PAIR_GEOMETRY_FROM_STRING: FieldType.GEOJSON,
    AnalyzerType.ARRAY: FieldType.GEOJSON,
    AnalyzerType.OBJECT: FieldType.GEOJSON,
    AnalyzerType.NUMBER: FieldType.STRING,
    AnalyzerType.STRING: FieldType.STRING,
    AnalyzerType.ZIPCODE: FieldType.STRING,
}


def analyzer_type_to_field_type(
    analyzer_type: Optional[str], on_warning: Optional[Callable[[str], None]] = None
) -> FieldType:
    """Convert a classifier category to a field type.

    Unknown categories fall back to ``string`` and are reported through
    ``on_warning`` (the module logger when omitted).
    """
    try:
        return ANALYZER_TO_FIELD_TYPE[AnalyzerType(analyzer_type)]
    except (KeyError, ValueError):
        message = f"Unsupported analyzer type: {analyzer_type}"
        if on_warning is not None:
            on_warning(message)
        else:
            logger.warning(message)
        return FieldType.STRING
