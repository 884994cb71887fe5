import logging

import pytest

from geotabular.core.processors.field_types import (
    ACCEPTED_ANALYZER_TYPES,
    IGNORED_ANALYZER_TYPES,
    AnalyzerType,
    FieldType,
    analyzer_type_to_field_type,
)


@pytest.mark.parametrize(
    "analyzer_type, field_type",
    [
        ("DATE", FieldType.DATE),
        ("TIME", FieldType.TIMESTAMP),
        ("DATETIME", FieldType.TIMESTAMP),
        ("INT", FieldType.INTEGER),
        ("FLOAT", FieldType.REAL),
        ("NUMBER", FieldType.STRING),
        ("BOOLEAN", FieldType.BOOLEAN),
        ("ZIPCODE", FieldType.STRING),
        ("GEOMETRY", FieldType.GEOJSON),
        ("GEOMETRY_FROM_STRING", FieldType.GEOJSON),
        ("PAIR_GEOMETRY_FROM_STRING", FieldType.GEOJSON),
        ("ARRAY", FieldType.GEOJSON),
        ("OBJECT", FieldType.GEOJSON),
        ("STRING", FieldType.STRING),
    ],
)
def test_analyzer_type_to_field_type(analyzer_type, field_type):
    assert analyzer_type_to_field_type(analyzer_type) == field_type


def test_every_accepted_type_is_mapped():
    warnings = []
    for analyzer_type in ACCEPTED_ANALYZER_TYPES:
        analyzer_type_to_field_type(analyzer_type.value, on_warning=warnings.append)

    assert warnings == []


def test_unknown_type_warns_and_falls_back_to_string():
    warnings = []

    assert analyzer_type_to_field_type("CURRENCY", on_warning=warnings.append) == FieldType.STRING
    assert analyzer_type_to_field_type("BOGUS", on_warning=warnings.append) == FieldType.STRING
    assert warnings == [
        "Unsupported analyzer type: CURRENCY",
        "Unsupported analyzer type: BOGUS",
    ]


def test_unknown_type_logs_without_callback(caplog):
    with caplog.at_level(logging.WARNING):
        assert analyzer_type_to_field_type(None) == FieldType.STRING

    assert "Unsupported analyzer type: None" in caplog.text


def test_ignored_types():
    assert set(IGNORED_ANALYZER_TYPES) == {
        AnalyzerType.CURRENCY,
        AnalyzerType.PERCENT,
        AnalyzerType.NONE,
    }


def test_field_type_has_value():
    assert FieldType.has_value("integer")
    assert FieldType.has_value("geojson")
    assert not FieldType.has_value("int")
    assert not FieldType.has_value(None)
