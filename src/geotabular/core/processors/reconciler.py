"""
Validation of externally supplied field metadata against row data.

Saved datasets come back with fields that may be incomplete or stale. Minor
problems (missing names) are repaired in place; any field with an unknown
type, a missing analyzer type or a timestamp format that no longer matches
the data causes the whole field list to be inferred again.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from geotabular.common.config import ProcessorConfig
from geotabular.common.exceptions import InvalidShapeError
from geotabular.core.processors.classifier import ClassifierAdapter
from geotabular.core.processors.field_types import FieldType
from geotabular.core.processors.sampler import (
    find_non_empty_rows_at_field,
    get_sample_for_type_analyze,
)
from geotabular.core.processors.schema import Dataset, Field, get_fields_from_data

logger = logging.getLogger(__name__)

TIME_CATEGORY = "TIME"


def _check_shape(data: Any) -> None:
    if not isinstance(data, (Mapping, Dataset)):
        raise InvalidShapeError(
            "data",
            "Dataset data cannot be null and must be an object",
            details={"input_type": type(data).__name__},
        )
    for attribute in ("fields", "rows"):
        value = getattr(data, attribute) if isinstance(data, Dataset) else data.get(attribute)
        if not isinstance(value, list):
            raise InvalidShapeError(
                attribute,
                f"Expected dataset {attribute} to be an array",
                details={"input_type": type(value).__name__},
            )


def _repair_fields(fields: List[Any]) -> List[Dict[str, Any]]:
    """Give every field a mapping form and a name."""
    repaired = []
    for i, f in enumerate(fields):
        if isinstance(f, Field):
            f = f.to_dict()
        elif not isinstance(f, Mapping):
            logger.warning(f"Fields need to be objects, found {type(f).__name__}")
            f = {}
        else:
            f = dict(f)

        if not f.get("name"):
            logger.warning(f"Field name is required but missing in {f}")
            f["name"] = f"column_{i}"
        repaired.append(f)
    return repaired


def _analyzer_type(f: Dict[str, Any]) -> Optional[str]:
    return f.get("analyzer_type") or f.get("analyzerType")


def _timestamp_matches(
    rows: List[List[Any]],
    f: Dict[str, Any],
    i: int,
    adapter: ClassifierAdapter,
    sample_size: int,
) -> bool:
    """Check the declared timestamp format against the first non-empty cells."""
    sample_rows = find_non_empty_rows_at_field(rows, i, sample_size)
    metadata = adapter.analyzer.compute_col_meta({"ts": [r[i] for r in sample_rows]})
    if not metadata:
        return False
    analyzed = metadata[0]
    return analyzed.category == TIME_CATEGORY and analyzed.format == (f.get("format") or "")


def _field_is_valid(
    f: Dict[str, Any],
    i: int,
    fields: List[Dict[str, Any]],
    rows: List[List[Any]],
    adapter: ClassifierAdapter,
    config: ProcessorConfig,
) -> bool:
    if not FieldType.has_value(f.get("type")):
        logger.warning(f"Unknown field type {f.get('type')!r} for '{f['name']}'")
        return False

    if not all(_analyzer_type(other) for other in fields):
        logger.warning("Field missing analyzer type")
        return False

    if f["type"] == FieldType.TIMESTAMP.value:
        if not _timestamp_matches(rows, f, i, adapter, config.validation_sample_count):
            logger.warning(f"Timestamp format of '{f['name']}' does not match its data")
            return False

    return True


def validate_input_data(
    data: Union[Mapping, Dataset],
    config: Optional[ProcessorConfig] = None,
    adapter: Optional[ClassifierAdapter] = None,
) -> Dataset:
    """Validate input data, re-inferring field types when any field is wrong.

    Args:
        data: A ``{"fields": [...], "rows": [...]}`` mapping or a Dataset
        config: Processor configuration
        adapter: Classifier adapter used for validation and re-inference

    Returns:
        The dataset with valid fields. Rows are never modified.

    Raises:
        InvalidShapeError: If data is not an object with list fields and rows
    """
    _check_shape(data)
    config = config or ProcessorConfig()
    adapter = adapter or ClassifierAdapter(config=config)

    if isinstance(data, Dataset):
        source, fields, rows = data, list(data.fields), data.rows
    else:
        source, fields, rows = None, data["fields"], data["rows"]

    repaired = _repair_fields(fields)
    all_valid = all(
        _field_is_valid(f, i, repaired, rows, adapter, config)
        for i, f in enumerate(repaired)
    )

    if all_valid:
        if source is not None and all(isinstance(f, Field) for f in fields):
            return source
        return Dataset(
            fields=[Field.from_dict(f, i) for i, f in enumerate(repaired)], rows=rows
        )

    # Type inference depends on the whole field order, so rebuild every field
    logger.info("Field metadata is invalid, inferring all field types again")
    field_order = [f["name"] for f in repaired]
    sample = get_sample_for_type_analyze(field_order, rows, config.sample_count)
    meta = get_fields_from_data(sample, field_order, adapter)

    updated = []
    for i, f in enumerate(repaired):
        updated.append(
            Field(
                name=f["name"],
                id=f.get("id") or f["name"],
                display_name=f.get("display_name") or f.get("displayName") or f["name"],
                field_idx=i,
                type=meta[i].type,
                format=meta[i].format,
                analyzer_type=meta[i].analyzer_type,
            )
        )

    return Dataset(fields=updated, rows=rows)
