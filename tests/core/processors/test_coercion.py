import math

import pytest

from geotabular.core.processors.coercion import (
    parse_boolean,
    parse_integer,
    parse_real,
    parse_rows_by_fields,
)
from geotabular.core.processors.field_types import FieldType
from geotabular.core.processors.schema import Field


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("True", True), ("TRUE", True), ("1", True), ("false", False), ("yes", False)],
)
def test_parse_boolean(value, expected):
    assert parse_boolean(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [("12", 12), (" -7", -7), ("12abc", 12), ("3.9", 3), (3.9, 3), ("abc", None), ("", None)],
)
def test_parse_integer(value, expected):
    assert parse_integer(value) == expected


def test_parse_real():
    assert parse_real("1.5") == 1.5
    assert parse_real("2.5kg") == 2.5
    assert parse_real(3) == 3.0
    assert math.isnan(parse_real("abc"))


def test_boolean_column():
    rows = [["true"], [None], ["false"], ["1"]]
    fields = [Field(name="flag", type=FieldType.BOOLEAN, field_idx=0)]

    parse_rows_by_fields(rows, fields)

    assert rows == [[True], [None], [False], [True]]


def test_integer_and_real_columns():
    rows = [["1", "1.5"], ["2", "x"]]
    fields = [
        Field(name="n", type=FieldType.INTEGER, field_idx=0),
        Field(name="r", type=FieldType.REAL, field_idx=1),
    ]

    parse_rows_by_fields(rows, fields)

    assert rows[0] == [1, 1.5]
    assert rows[1][0] == 2
    assert math.isnan(rows[1][1])


def test_already_typed_column_is_left_alone():
    rows = [[None], [1], ["2"]]
    fields = [Field(name="n", type=FieldType.INTEGER, field_idx=0)]

    parse_rows_by_fields(rows, fields)

    assert rows == [[None], [1], ["2"]]


def test_string_and_date_columns_are_not_coerced():
    rows = [["1", "2016-09-17"]]
    fields = [
        Field(name="s", type=FieldType.STRING, field_idx=0),
        Field(name="d", type=FieldType.DATE, field_idx=1, format="YYYY-M-D"),
    ]

    parse_rows_by_fields(rows, fields)

    assert rows == [["1", "2016-09-17"]]


def test_epoch_timestamp_column():
    rows = [["1474070995000"], ["1474071056000"]]
    fields = [Field(name="t", type=FieldType.TIMESTAMP, field_idx=0, format="x")]

    parse_rows_by_fields(rows, fields)

    assert rows == [[1474070995000], [1474071056000]]


def test_formatted_timestamp_column_stays_text():
    rows = [["2016-09-17 00:09:55"]]
    fields = [
        Field(name="t", type=FieldType.TIMESTAMP, field_idx=0, format="YYYY-M-D H:m:s")
    ]

    parse_rows_by_fields(rows, fields)

    assert rows == [["2016-09-17 00:09:55"]]


def test_coerced_values_are_mirrored_into_features():
    feature = {
        "type": "Feature",
        "properties": {"count": "3", "flag": "true"},
        "geometry": {"type": "Point", "coordinates": [1, 2]},
    }
    rows = [[feature, "3", "true"]]
    fields = [
        Field(name="_geojson", type=FieldType.GEOJSON, field_idx=0),
        Field(name="count", type=FieldType.INTEGER, field_idx=1),
        Field(name="flag", type=FieldType.BOOLEAN, field_idx=2),
    ]

    parse_rows_by_fields(rows, fields)

    assert rows[0][1:] == [3, True]
    assert feature["properties"] == {"count": 3, "flag": True}


def test_mirroring_uses_configured_geojson_field():
    feature = {"type": "Feature", "properties": {"n": "1"}, "geometry": None}
    rows = [[feature, "1"]]
    fields = [
        Field(name="shape", type=FieldType.GEOJSON, field_idx=0),
        Field(name="n", type=FieldType.INTEGER, field_idx=1),
    ]

    parse_rows_by_fields(rows, fields, geojson_field_name="shape")

    assert feature["properties"]["n"] == 1
