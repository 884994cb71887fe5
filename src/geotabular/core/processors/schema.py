"""
Field descriptors, datasets and the builder that derives fields from a sample.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Union

import pandas as pd

from geotabular.core.processors.classifier import ClassifierAdapter
from geotabular.core.processors.field_types import FieldType
from geotabular.core.processors.naming import rename_duplicate_fields
from geotabular.core.processors.sampler import Sample


class RowDataContainer:
    """Row storage backed by plain row lists."""

    def __init__(self, rows: List[List[Any]]):
        self._rows = rows

    def num_rows(self) -> int:
        return len(self._rows)

    def num_columns(self) -> int:
        return len(self._rows[0]) if self._rows else 0

    def value_at(self, row_index: int, column_index: int) -> Any:
        return self._rows[row_index][column_index]

    def rows(self) -> Iterator[List[Any]]:
        return iter(self._rows)


class DataFrameContainer:
    """Columnar row storage backed by a pandas DataFrame."""

    def __init__(self, frame: pd.DataFrame):
        self.frame = frame

    @classmethod
    def from_rows(cls, rows: List[List[Any]], columns: Sequence[str]):
        return cls(pd.DataFrame(rows, columns=list(columns), dtype=object))

    def num_rows(self) -> int:
        return len(self.frame.index)

    def num_columns(self) -> int:
        return len(self.frame.columns)

    def value_at(self, row_index: int, column_index: int) -> Any:
        value = self.frame.iat[row_index, column_index]
        return None if _is_missing(value) else value

    def rows(self) -> Iterator[List[Any]]:
        for values in self.frame.itertuples(index=False, name=None):
            yield [None if _is_missing(v) else v for v in values]


def _is_missing(value: Any) -> bool:
    # pandas stores None as NaN/NaT in some dtypes; containers hand back None
    return value is None or value is pd.NaT


DataContainer = Union[RowDataContainer, DataFrameContainer]


@dataclass
class Field:
    """Metadata of one column of a dataset."""

    name: str
    type: FieldType
    field_idx: int
    format: str = ""
    analyzer_type: Optional[str] = None
    id: Optional[str] = None
    display_name: Optional[str] = None

    def __post_init__(self):
        self.type = FieldType(self.type)
        if self.id is None:
            self.id = self.name
        if self.display_name is None:
            self.display_name = self.name

    def value_accessor(self, data_container: DataContainer) -> Callable[[int], Any]:
        """Return a getter reading this field's value at a row position."""

        def get_value(row_index: int) -> Any:
            return data_container.value_at(row_index, self.field_idx)

        return get_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "display_name": self.display_name,
            "field_idx": self.field_idx,
            "type": self.type.value,
            "format": self.format,
            "analyzer_type": self.analyzer_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Field":
        """Build a field from a serialized mapping.

        Both snake_case and camelCase keys are accepted. ``type`` must be a
        known FieldType value.
        """
        field_idx = data.get("field_idx", data.get("fieldIdx"))
        try:
            field_idx = index if field_idx is None else int(field_idx)
        except (TypeError, ValueError):
            field_idx = index
        return cls(
            name=data["name"],
            id=data.get("id"),
            display_name=data.get("display_name", data.get("displayName")),
            field_idx=field_idx,
            type=FieldType(data["type"]),
            format=data.get("format") or "",
            analyzer_type=data.get("analyzer_type", data.get("analyzerType")),
        )


@dataclass
class Dataset:
    """A normalized dataset: ordered fields plus rows aligned with them."""

    fields: List[Field] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)

    def data_container(self) -> RowDataContainer:
        return RowDataContainer(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {"fields": [f.to_dict() for f in self.fields], "rows": self.rows}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dataset":
        return cls(
            fields=[Field.from_dict(f, i) for i, f in enumerate(data["fields"])],
            rows=data["rows"],
        )


def get_fields_from_data(
    data: Sample,
    field_order: Sequence[Any],
    adapter: Optional[ClassifierAdapter] = None,
) -> List[Field]:
    """Analyze field types from sampled values.

    Assigns ``type``, ``field_idx`` and ``format`` to each field, renaming
    duplicated names on the way. The classifier sees the original names, so
    name rules apply to what the input called the column.

    Args:
        data: Sample keyed by original field names
        field_order: Original field names in column order
        adapter: Classifier adapter to use

    Returns:
        One Field per entry of ``field_order``

    Example:
        >>> sample = {"value": ["4", "3", None], "isTrip": ["true", "false", None]}
        >>> [(f.name, f.type.value) for f in get_fields_from_data(sample, ["value", "isTrip"])]
        [('value', 'integer'), ('isTrip', 'boolean')]
    """
    adapter = adapter or ClassifierAdapter()
    metadata = adapter.classify(data)
    renamed = rename_duplicate_fields(field_order)

    fields = []
    for index, original in enumerate(field_order):
        name = renamed.field_by_index[index]
        meta = metadata.get(original)
        if meta is None:
            analyzer_type, field_type, fmt = None, FieldType.STRING, ""
        else:
            analyzer_type = getattr(meta.type, "value", meta.type)
            field_type = adapter.to_field_type(analyzer_type)
            fmt = meta.format or ""

        fields.append(
            Field(
                name=name,
                id=name,
                display_name=name,
                field_idx=index,
                type=field_type,
                format=fmt,
                analyzer_type=analyzer_type,
            )
        )

    return fields
