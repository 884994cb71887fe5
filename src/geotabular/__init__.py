"""geotabular: normalize tabular and GeoJSON input into typed datasets.

Public entry points:
    process_csv_data(raw_data, header=None, config=None)
    process_row_object(raw_data, config=None)
    process_geojson(raw_data, config=None)
    validate_input_data(data, config=None)
    format_csv(data, fields)
"""

from geotabular.core.processors.field_types import FieldType  # noqa: F401
from geotabular.core.processors.processor import (  # noqa: F401
    DATASET_HANDLERS,
    format_csv,
    process_csv_data,
    process_dataset,
    process_geojson,
    process_row_object,
)
from geotabular.core.processors.reconciler import validate_input_data  # noqa: F401
from geotabular.core.processors.schema import Dataset, Field  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "DATASET_HANDLERS",
    "Dataset",
    "Field",
    "FieldType",
    "format_csv",
    "process_csv_data",
    "process_dataset",
    "process_geojson",
    "process_row_object",
    "validate_input_data",
]
