"""
Ingestion entry points turning raw input into a normalized Dataset.

Supported inputs are delimited text (or rows of cells), lists of row
objects and GeoJSON. Every entry point ends in the same pipeline: null-like
cleanup, sampling, field inference and in-place coercion.
"""

import json
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from geotabular.common.config import ProcessorConfig
from geotabular.common.exceptions import (
    EmptyInputError,
    InvalidGeoJSONError,
    MalformedInputError,
)
from geotabular.core.processors.classifier import ClassifierAdapter
from geotabular.core.processors.coercion import parse_rows_by_fields
from geotabular.core.processors.field_types import FieldType
from geotabular.core.processors.geojson import normalize_geojson
from geotabular.core.processors.sampler import (
    clean_up_falsy_values,
    get_sample_for_type_analyze,
)
from geotabular.core.processors.schema import (
    DataFrameContainer,
    Dataset,
    Field,
    RowDataContainer,
    get_fields_from_data,
)
from geotabular.core.utils.csv_utils import format_csv_rows, parse_csv_rows

logger = logging.getLogger(__name__)


def _fit_rows_to_header(rows: List[List[Any]], width: int) -> None:
    """Pad short rows with None and cut long ones, in place."""
    ragged = 0
    for i, row in enumerate(rows):
        if len(row) == width:
            continue
        ragged += 1
        if len(row) < width:
            row.extend([None] * (width - len(row)))
        else:
            rows[i] = row[:width]
    if ragged:
        logger.warning(f"{ragged} rows did not match the header width of {width}")


def process_csv_data(
    raw_data: Union[str, List[List[Any]]],
    header: Optional[Sequence[Any]] = None,
    config: Optional[ProcessorConfig] = None,
    adapter: Optional[ClassifierAdapter] = None,
) -> Dataset:
    """Process csv data into a Dataset of typed fields and coerced rows.

    Args:
        raw_data: Raw csv text whose first row is the header, or a list of
            row lists
        header: Column names when ``raw_data`` is a list of rows. Without it
            the first row is taken as the header.
        config: Processor configuration
        adapter: Classifier adapter

    Returns:
        The normalized dataset

    Raises:
        EmptyInputError: If there is no header or no data row
        MalformedInputError: If raw_data is neither text nor a list of rows

    Example:
        >>> dataset = process_csv_data("a,b\\n1,true\\n2,false\\n")
        >>> [(f.name, f.type.value) for f in dataset.fields]
        [('a', 'integer'), ('b', 'boolean')]
        >>> dataset.rows
        [[1, True], [2, False]]
    """
    config = config or ProcessorConfig()

    if isinstance(raw_data, str):
        parsed_rows = parse_csv_rows(raw_data)
        if len(parsed_rows) < 2:
            raise EmptyInputError(
                "Process csv data failed: CSV is empty",
                details={"row_count": len(parsed_rows)},
            )
        header_row: List[Any] = parsed_rows[0]
        rows: List[List[Any]] = parsed_rows[1:]
    elif isinstance(raw_data, list):
        if not raw_data:
            raise EmptyInputError("Process csv data failed: no rows were passed")
        if not all(isinstance(row, list) for row in raw_data):
            raise MalformedInputError(
                "Invalid input passed to process_csv_data: expected a list of rows"
            )
        if header is None:
            # Rows passed without header: the first row is the header
            header_row, rows = list(raw_data[0]), raw_data[1:]
        else:
            header_row, rows = list(header), raw_data
        if not rows:
            raise EmptyInputError(
                "Process csv data failed: no data rows after the header"
            )
    else:
        raise MalformedInputError(
            "Invalid input passed to process_csv_data",
            details={"input_type": type(raw_data).__name__},
        )

    _fit_rows_to_header(rows, len(header_row))
    clean_up_falsy_values(rows, config.null_tokens)

    # No need to run type detection on every data point
    sample = get_sample_for_type_analyze(header_row, rows, config.sample_count)
    fields = get_fields_from_data(
        sample, header_row, adapter or ClassifierAdapter(config=config)
    )
    parsed_rows = parse_rows_by_fields(rows, fields, config.geojson_field_name)

    logger.info(
        f"Processed {len(parsed_rows)} rows into {len(fields)} fields",
        extra={"row_count": len(parsed_rows), "field_count": len(fields)},
    )
    return Dataset(fields=fields, rows=parsed_rows)


def process_row_object(
    raw_data: Any,
    config: Optional[ProcessorConfig] = None,
    adapter: Optional[ClassifierAdapter] = None,
) -> Optional[Dataset]:
    """Process a list of row objects sharing the keys of the first one.

    Missing keys read as None. The row objects themselves are not modified.

    Returns:
        The normalized dataset, an empty one for an empty list, or None when
        ``raw_data`` is not a list
    """
    if not isinstance(raw_data, list):
        return None
    if not raw_data:
        return Dataset(fields=[], rows=[])

    first = raw_data[0]
    if not isinstance(first, dict):
        raise MalformedInputError(
            "Row objects must be mappings",
            details={"input_type": type(first).__name__},
        )

    keys = list(first.keys())
    rows = [[d.get(key) for key in keys] for d in raw_data]
    return process_csv_data(rows, keys, config=config, adapter=adapter)


def process_geojson(
    raw_data: Any,
    config: Optional[ProcessorConfig] = None,
    adapter: Optional[ClassifierAdapter] = None,
) -> Dataset:
    """Process a GeoJSON object into a Dataset.

    Each feature with a geometry becomes a row holding its properties and,
    under the ``_geojson`` field, the feature itself. Properties missing on
    some features are filled with None on the row and in the feature.

    Raises:
        InvalidGeoJSONError: If raw_data cannot be normalized to features
    """
    config = config or ProcessorConfig()
    geo_key = config.geojson_field_name
    normalized = normalize_geojson(raw_data)

    if not normalized or not isinstance(normalized.get("features"), list):
        raise InvalidGeoJSONError(
            "Read file failed: file is not a valid GeoJSON",
            details={"input_type": type(raw_data).__name__},
        )

    all_data_rows: List[Dict[str, Any]] = []
    for feature in normalized["features"]:
        if not isinstance(feature, dict) or not feature.get("geometry"):
            continue
        if not isinstance(feature.get("properties"), dict):
            feature["properties"] = {}
        all_data_rows.append({geo_key: feature, **feature["properties"]})

    field_names: List[str] = []
    for row in all_data_rows:
        for key in row:
            if key not in field_names:
                field_names.append(key)

    # Make sure each feature has the exact same fields
    for row in all_data_rows:
        for name in field_names:
            if name not in row:
                row[name] = None
                row[geo_key]["properties"][name] = None

    rows = [[row[name] for name in field_names] for row in all_data_rows]
    if not rows:
        return Dataset(fields=[], rows=[])

    return process_csv_data(rows, field_names, config=config, adapter=adapter)


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_field_value(value: Any, field_type: Union[FieldType, str]) -> str:
    """Stringify a value for export according to its field type."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if FieldType(field_type) == FieldType.GEOJSON:
        if isinstance(value, str):
            return value
        if isinstance(value, (dict, list, tuple)):
            return json.dumps(value)
        return ""
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def format_csv(data: Any, fields: Sequence[Field]) -> str:
    """Export data to csv text: a header of display names, then the rows.

    Args:
        data: A Dataset, a data container or a list of rows
        fields: Fields describing the columns
    """
    if isinstance(data, Dataset):
        rows: Iterable[Sequence[Any]] = data.data_container().rows()
    elif isinstance(data, (RowDataContainer, DataFrameContainer)):
        rows = data.rows()
    else:
        rows = data

    columns = [f.display_name or f.name for f in fields]
    formatted = [columns]
    for row in rows:
        formatted.append([parse_field_value(d, fields[i].type) for i, d in enumerate(row)])

    return format_csv_rows(formatted)


DATASET_HANDLERS = {
    "row": process_row_object,
    "geojson": process_geojson,
    "csv": process_csv_data,
}


def detect_dataset_format(raw_data: Any) -> str:
    """Guess which handler suits ``raw_data``."""
    if isinstance(raw_data, str):
        return "csv"
    if isinstance(raw_data, dict):
        return "geojson"
    if isinstance(raw_data, list) and raw_data:
        if isinstance(raw_data[0], dict):
            return "row"
        if isinstance(raw_data[0], list):
            return "csv"
    raise MalformedInputError(
        "Cannot detect the format of the input data",
        details={"input_type": type(raw_data).__name__},
    )


def process_dataset(
    raw_data: Any,
    dataset_format: str = "auto",
    config: Optional[ProcessorConfig] = None,
) -> Optional[Dataset]:
    """Dispatch raw data to the handler registered for ``dataset_format``."""
    if dataset_format == "auto":
        dataset_format = detect_dataset_format(raw_data)

    handler = DATASET_HANDLERS.get(dataset_format)
    if handler is None:
        raise MalformedInputError(
            f"Unknown dataset format '{dataset_format}'",
            details={"available_formats": list(DATASET_HANDLERS)},
        )
    logger.debug(
        f"Dispatching to the {dataset_format} handler",
        extra={"dataset_format": dataset_format},
    )
    return handler(raw_data, config=config)
