"""
Tests for the ingestion entry points and CSV export.
"""

import copy
import math

import pytest

from geotabular.common.config import ProcessorConfig
from geotabular.common.exceptions import (
    EmptyInputError,
    InvalidGeoJSONError,
    MalformedInputError,
)
from geotabular.core.processors.field_types import FieldType
from geotabular.core.processors.processor import (
    DATASET_HANDLERS,
    detect_dataset_format,
    format_csv,
    parse_field_value,
    process_csv_data,
    process_dataset,
    process_geojson,
    process_row_object,
)
from geotabular.core.processors.schema import Dataset, Field


def _types(dataset):
    return [(f.name, f.type) for f in dataset.fields]


# --- process_csv_data ---


def test_process_csv_text():
    dataset = process_csv_data("a,b\n1,true\n2,false\n")

    assert _types(dataset) == [("a", FieldType.INTEGER), ("b", FieldType.BOOLEAN)]
    assert dataset.rows == [[1, True], [2, False]]


def test_process_csv_trips(trips_csv):
    dataset = process_csv_data(trips_csv)

    assert _types(dataset) == [
        ("trip_id", FieldType.INTEGER),
        ("fare", FieldType.REAL),
        ("is_shared", FieldType.BOOLEAN),
        ("pickup_time", FieldType.TIMESTAMP),
        ("pickup_zip", FieldType.STRING),
    ]
    assert dataset.fields[3].format == "YYYY-M-D H:m:s"
    assert dataset.fields[4].analyzer_type == "ZIPCODE"
    assert dataset.rows[0] == [1, 12.5, True, "2016-09-17 00:09:55", "02139"]
    assert dataset.rows[2] == [3, None, True, "2016-09-17 00:12:30", None]


def test_process_csv_rows_with_header():
    dataset = process_csv_data([["1", "x"], ["2", "y"]], header=["n", "s"])

    assert _types(dataset) == [("n", FieldType.INTEGER), ("s", FieldType.STRING)]
    assert dataset.rows == [[1, "x"], [2, "y"]]


def test_process_csv_rows_first_row_is_header():
    dataset = process_csv_data([["n"], ["1"]])

    assert _types(dataset) == [("n", FieldType.INTEGER)]
    assert dataset.rows == [[1]]


def test_null_tokens_become_none():
    dataset = process_csv_data("a,b\n1,NULL\n2,3\n,NaN\n")

    assert dataset.rows == [[1, None], [2, 3], [None, None]]


def test_custom_null_tokens():
    config = ProcessorConfig(null_tokens=["-"])

    dataset = process_csv_data("a\n1\n-\n", config=config)

    assert dataset.rows == [[1], [None]]


def test_ragged_rows_are_fitted_to_header():
    dataset = process_csv_data("a,b\n1\n2,3,4\n")

    assert dataset.rows == [[1, None], [2, 3]]


def test_duplicate_header_names():
    dataset = process_csv_data("a,a,a\n1,2,3\n")

    assert [f.name for f in dataset.fields] == ["a", "a-0", "a-1"]
    assert dataset.rows == [[1, 2, 3]]


def test_sample_count_limits_inference():
    config = ProcessorConfig(sample_count=2)

    dataset = process_csv_data("n\n1\n2\nthree\n", config=config)

    assert dataset.fields[0].type == FieldType.INTEGER
    assert dataset.rows == [[1], [2], [None]]


@pytest.mark.parametrize("raw", ["", "a,b\n", "a,b\n\n"])
def test_empty_csv_text(raw):
    with pytest.raises(EmptyInputError):
        process_csv_data(raw)


def test_empty_row_list():
    with pytest.raises(EmptyInputError):
        process_csv_data([])
    with pytest.raises(EmptyInputError):
        process_csv_data([["a", "b"]])


@pytest.mark.parametrize("raw", [42, {"a": 1}, [["a"], "b"]])
def test_malformed_csv_input(raw):
    with pytest.raises(MalformedInputError):
        process_csv_data(raw)


# --- process_row_object ---


def test_process_row_object(station_rows):
    original = copy.deepcopy(station_rows)

    dataset = process_row_object(station_rows)

    assert _types(dataset) == [
        ("lat", FieldType.REAL),
        ("lng", FieldType.REAL),
        ("value", FieldType.INTEGER),
        ("name", FieldType.STRING),
    ]
    assert dataset.rows[2] == [37.3382, -121.8863, None, "San Jose"]
    assert station_rows == original


def test_row_object_keys_come_from_first_row():
    dataset = process_row_object([{"a": "1"}, {"a": "2", "b": "x"}, {"c": "y"}])

    assert [f.name for f in dataset.fields] == ["a"]
    assert dataset.rows == [[1], [2], [None]]


def test_row_object_edge_cases():
    assert process_row_object("a,b") is None
    assert process_row_object({"a": 1}) is None
    assert process_row_object([]) == Dataset(fields=[], rows=[])

    with pytest.raises(MalformedInputError):
        process_row_object([["a"]])


# --- process_geojson ---


def test_process_geojson(feature_collection):
    dataset = process_geojson(feature_collection)

    assert _types(dataset) == [
        ("_geojson", FieldType.GEOJSON),
        ("name", FieldType.STRING),
        ("count", FieldType.INTEGER),
    ]
    assert dataset.fields[0].analyzer_type == "GEOMETRY"
    # The feature without geometry is dropped
    assert [row[1:] for row in dataset.rows] == [["A", 1], ["B", None]]


def test_geojson_properties_mirror_rows(feature_collection):
    dataset = process_geojson(feature_collection)

    for row in dataset.rows:
        feature = row[0]
        assert feature["properties"] == {"name": row[1], "count": row[2]}


def test_process_single_geometry():
    dataset = process_geojson({"type": "Point", "coordinates": [1, 2]})

    assert _types(dataset) == [("_geojson", FieldType.GEOJSON)]
    assert dataset.rows[0][0]["properties"] == {}


def test_process_geojson_text(feature_collection):
    import json

    dataset = process_geojson(json.dumps(feature_collection))

    assert len(dataset.rows) == 2


def test_geojson_without_geometries():
    collection = {
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"a": 1}, "geometry": None}],
    }

    assert process_geojson(collection) == Dataset(fields=[], rows=[])


@pytest.mark.parametrize(
    "raw", [None, "not json", {"type": "Unknown"}, {"type": "FeatureCollection"}]
)
def test_invalid_geojson(raw):
    with pytest.raises(InvalidGeoJSONError):
        process_geojson(raw)


# --- export ---


def test_format_csv_round_trip():
    dataset = process_csv_data("a,b\n1,true\n2,false\n")

    assert format_csv(dataset, dataset.fields) == "a,b\n1,true\n2,false"


def test_format_csv_uses_display_names():
    fields = [
        Field(name="n", type="real", field_idx=0, display_name="Number"),
        Field(name="s", type="string", field_idx=1),
    ]

    text = format_csv([[1.5, None], [2.0, "x, y"]], fields)

    assert text == 'Number,s\n1.5,\n2,"x, y"'


def test_format_csv_container():
    dataset = Dataset(fields=[Field(name="n", type="integer", field_idx=0)], rows=[[1], [2]])

    assert format_csv(dataset.data_container(), dataset.fields) == "n\n1\n2"


@pytest.mark.parametrize(
    "value, field_type, expected",
    [
        (None, "string", ""),
        (True, "boolean", "true"),
        (False, "boolean", "false"),
        (3, "integer", "3"),
        (1.0, "real", "1"),
        (0.1, "real", "0.1"),
        (math.nan, "real", "NaN"),
        (math.inf, "real", "Infinity"),
        ({"type": "Point", "coordinates": [1, 2]}, "geojson", '{"type": "Point", "coordinates": [1, 2]}'),
        ("POINT (1 2)", "geojson", "POINT (1 2)"),
        (12, "geojson", ""),
        ("text", "string", "text"),
    ],
)
def test_parse_field_value(value, field_type, expected):
    assert parse_field_value(value, field_type) == expected


# --- dispatch ---


def test_dataset_handlers():
    assert set(DATASET_HANDLERS) == {"row", "geojson", "csv"}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a,b\n1,2", "csv"),
        ([["a"], ["1"]], "csv"),
        ([{"a": 1}], "row"),
        ({"type": "Point", "coordinates": [0, 0]}, "geojson"),
    ],
)
def test_detect_dataset_format(raw, expected):
    assert detect_dataset_format(raw) == expected


@pytest.mark.parametrize("raw", [[], 42, None])
def test_detect_dataset_format_fails(raw):
    with pytest.raises(MalformedInputError):
        detect_dataset_format(raw)


def test_process_dataset(station_rows):
    dataset = process_dataset(station_rows)

    assert dataset.fields[0].type == FieldType.REAL


def test_process_dataset_explicit_format():
    dataset = process_dataset("a\n1\n", "csv", config=ProcessorConfig())

    assert dataset.rows == [[1]]


def test_process_dataset_unknown_format():
    with pytest.raises(MalformedInputError):
        process_dataset("a\n1\n", "xml")


def test_mixed_case_booleans_stay_text():
    dataset = process_csv_data("flag\ntRuE\nfalse\nTrUe\n")

    assert _types(dataset) == [("flag", FieldType.STRING)]
    assert dataset.rows == [["tRuE"], ["false"], ["TrUe"]]


def test_upper_case_booleans_are_coerced():
    dataset = process_csv_data("flag\nTRUE\nFALSE\n")

    assert _types(dataset) == [("flag", FieldType.BOOLEAN)]
    assert dataset.rows == [[True], [False]]


def test_phone_numbers_are_not_timestamps():
    dataset = process_csv_data("phone\n5551234567\n5559876543\n")

    assert _types(dataset) == [("phone", FieldType.INTEGER)]
    assert dataset.rows == [[5551234567], [5559876543]]
