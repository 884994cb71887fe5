"""
Column type classification.

``TypeAnalyzer`` looks at sampled values and proposes a classifier category
(``INT``, ``DATETIME``, ``GEOMETRY``...) plus a parsing format for temporal
columns. ``ClassifierAdapter`` wraps any object exposing the same
``compute_col_meta`` method, adds the name based rules and restricts the
output to the accepted categories.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
)

import pandas as pd
from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import shape

from geotabular.common.config import NameRule, ProcessorConfig
from geotabular.core.processors.field_types import (
    ANALYZER_CATEGORIES,
    IGNORED_ANALYZER_TYPES,
    AnalyzerType,
    FieldType,
    analyzer_type_to_field_type,
)

logger = logging.getLogger(__name__)

GEOJSON_GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}

INT_PATTERN = re.compile(r"^[-+]?\d+$")
FLOAT_PATTERN = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")
NUMBER_PATTERN = re.compile(r"^[-+]?\d{1,3}(,\d{3})+(\.\d+)?$")
CURRENCY_PATTERN = re.compile(r"^[-+]?[$€£¥]\s?\d[\d,]*(\.\d+)?$")
PERCENT_PATTERN = re.compile(r"^[-+]?\d+(\.\d+)?\s?%$")
ZIPCODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")
PAIR_PATTERN = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)\s*,\s*([-+]?\d+(?:\.\d+)?)\s*$")
BOOLEAN_STRINGS = ("true", "false", "True", "False", "TRUE", "FALSE")
WKT_PATTERN = re.compile(
    r"^\s*(POINT|LINESTRING|POLYGON|MULTIPOINT|MULTILINESTRING|MULTIPOLYGON"
    r"|GEOMETRYCOLLECTION)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class TemporalFormat:
    """A moment-style format with its matching regex and strptime pattern."""

    format: str
    pattern: "re.Pattern"
    strptime: str
    analyzer_type: AnalyzerType


def _temporal(fmt: str, pattern: str, strptime: str, analyzer_type: AnalyzerType):
    return TemporalFormat(fmt, re.compile(pattern), strptime, analyzer_type)


_D = r"\d{4}-\d{1,2}-\d{1,2}"

TEMPORAL_FORMATS = [
    _temporal("YYYY-M-D", rf"^{_D}$", "%Y-%m-%d", AnalyzerType.DATE),
    _temporal("YYYY/M/D", r"^\d{4}/\d{1,2}/\d{1,2}$", "%Y/%m/%d", AnalyzerType.DATE),
    _temporal("M/D/YYYY", r"^\d{1,2}/\d{1,2}/\d{4}$", "%m/%d/%Y", AnalyzerType.DATE),
    _temporal(
        "YYYY-M-D H:m:s",
        rf"^{_D} \d{{1,2}}:\d{{1,2}}:\d{{1,2}}$",
        "%Y-%m-%d %H:%M:%S",
        AnalyzerType.DATETIME,
    ),
    _temporal(
        "YYYY-M-D H:m",
        rf"^{_D} \d{{1,2}}:\d{{1,2}}$",
        "%Y-%m-%d %H:%M",
        AnalyzerType.DATETIME,
    ),
    _temporal(
        "YYYY-M-DTHH:mm:ss.SSSZ",
        rf"^{_D}T\d{{2}}:\d{{2}}:\d{{2}}\.\d{{3}}Z$",
        "%Y-%m-%dT%H:%M:%S.%fZ",
        AnalyzerType.DATETIME,
    ),
    _temporal(
        "YYYY-M-DTHH:mm:ssZ",
        rf"^{_D}T\d{{2}}:\d{{2}}:\d{{2}}Z$",
        "%Y-%m-%dT%H:%M:%SZ",
        AnalyzerType.DATETIME,
    ),
    _temporal(
        "YYYY-M-D HH:mm:ssZZ",
        rf"^{_D} \d{{2}}:\d{{2}}:\d{{2}}[+-]\d{{2}}:\d{{2}}$",
        "%Y-%m-%d %H:%M:%S%z",
        AnalyzerType.DATETIME,
    ),
    _temporal("H:m:s", r"^\d{1,2}:\d{1,2}:\d{1,2}$", "%H:%M:%S", AnalyzerType.TIME),
    _temporal("H:m", r"^\d{1,2}:\d{2}$", "%H:%M", AnalyzerType.TIME),
]

# Epoch timestamps, keyed by digit count
EPOCH_FORMATS = {13: "x", 10: "X"}
# Epoch values past 2100-01-01 are read as plain integers
EPOCH_MAX_SECONDS = 4102444800
EPOCH_DIVISORS = {"x": 1000, "X": 1}

Detection = Optional[Tuple[AnalyzerType, str]]


@dataclass
class ColumnMeta:
    """Classifier output for one column."""

    key: Any
    type: AnalyzerType
    category: str
    format: str = ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int_like(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and INT_PATTERN.match(value) is not None


def _is_float_like(value: Any) -> bool:
    if _is_number(value):
        return True
    return isinstance(value, str) and FLOAT_PATTERN.match(value) is not None


def _is_geometry_dict(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    geometry = value.get("geometry") if value.get("type") == "Feature" else value
    if not isinstance(geometry, dict) or geometry.get("type") not in GEOJSON_GEOMETRY_TYPES:
        return False
    try:
        shape(geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, AttributeError, IndexError):
        return False
    return True


def _is_geometry_string(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    if WKT_PATTERN.match(value):
        try:
            wkt.loads(value)
        except (ShapelyError, ValueError):
            return False
        return True
    if value.lstrip().startswith("{"):
        try:
            return _is_geometry_dict(json.loads(value))
        except ValueError:
            return False
    return False


def _is_coordinate_pair(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    match = PAIR_PATTERN.match(value)
    if not match:
        return False
    lat, lng = float(match.group(1)), float(match.group(2))
    return -90 <= lat <= 90 and -180 <= lng <= 180


class TypeAnalyzer:
    """Proposes a classifier category for each sampled column.

    Detectors run in a fixed order; the first one accepting every non-null
    value of the column wins, unless its category is ignored, in which case
    the next detector is tried. Columns nothing matches are ``STRING``.
    """

    def __init__(self) -> None:
        self._detectors: List[Callable[[List[Any]], Detection]] = [
            self._detect_boolean,
            self._detect_epoch,
            self._detect_zipcode,
            self._detect_integer,
            self._detect_float,
            self._detect_number,
            self._detect_currency,
            self._detect_percent,
            self._detect_temporal,
            self._detect_geometry,
            self._detect_geometry_from_string,
            self._detect_pair_geometry,
            self._detect_array,
            self._detect_object,
        ]

    def compute_col_meta(
        self,
        sample: Dict[Any, Sequence[Any]],
        rules: Optional[Iterable[NameRule]] = None,
        ignored_types: Iterable[AnalyzerType] = (),
    ) -> List[ColumnMeta]:
        """Classify every column of ``sample``.

        Args:
            sample: Mapping from column name to sampled values
            rules: Name rules checked before looking at the values
            ignored_types: Categories that must never be returned

        Returns:
            One ColumnMeta per column, in sample order
        """
        rules = list(rules or [])
        ignored = set(ignored_types)
        metadata = []

        for key, values in sample.items():
            rule = next((r for r in rules if r.matches(key)), None)
            if rule is not None:
                analyzer_type, fmt = AnalyzerType(rule.data_type), ""
            else:
                analyzer_type, fmt = self.detect(values, ignored)

            metadata.append(
                ColumnMeta(
                    key=key,
                    type=analyzer_type,
                    category=ANALYZER_CATEGORIES[analyzer_type],
                    format=fmt,
                )
            )

        return metadata

    def detect(self, values: Sequence[Any], ignored=frozenset()) -> Tuple[AnalyzerType, str]:
        present = [v for v in values if v is not None]
        if not present:
            return AnalyzerType.STRING, ""

        for detector in self._detectors:
            detected = detector(present)
            if detected is not None and detected[0] not in ignored:
                return detected

        return AnalyzerType.STRING, ""

    @staticmethod
    def _detect_boolean(values: List[Any]) -> Detection:
        if all(
            isinstance(v, bool) or v in BOOLEAN_STRINGS
            for v in values
        ):
            return AnalyzerType.BOOLEAN, ""
        return None

    @staticmethod
    def _detect_epoch(values: List[Any]) -> Detection:
        if not all(_is_int_like(v) for v in values):
            return None
        lengths = {len(str(v).lstrip("+")) for v in values}
        if len(lengths) == 1:
            fmt = EPOCH_FORMATS.get(lengths.pop())
            if fmt and all(
                0 <= int(v) <= EPOCH_MAX_SECONDS * EPOCH_DIVISORS[fmt] for v in values
            ):
                return AnalyzerType.TIME, fmt
        return None

    @staticmethod
    def _detect_zipcode(values: List[Any]) -> Detection:
        if all(isinstance(v, str) and ZIPCODE_PATTERN.match(v) for v in values) and any(
            v.startswith("0") or "-" in v for v in values
        ):
            return AnalyzerType.ZIPCODE, ""
        return None

    @staticmethod
    def _detect_integer(values: List[Any]) -> Detection:
        if all(_is_int_like(v) for v in values):
            return AnalyzerType.INT, ""
        return None

    @staticmethod
    def _detect_float(values: List[Any]) -> Detection:
        if all(_is_float_like(v) for v in values):
            return AnalyzerType.FLOAT, ""
        return None

    @staticmethod
    def _detect_number(values: List[Any]) -> Detection:
        if any(isinstance(v, str) and NUMBER_PATTERN.match(v) for v in values) and all(
            _is_float_like(v) or (isinstance(v, str) and NUMBER_PATTERN.match(v))
            for v in values
        ):
            return AnalyzerType.NUMBER, ""
        return None

    @staticmethod
    def _detect_currency(values: List[Any]) -> Detection:
        if all(isinstance(v, str) and CURRENCY_PATTERN.match(v) for v in values):
            return AnalyzerType.CURRENCY, ""
        return None

    @staticmethod
    def _detect_percent(values: List[Any]) -> Detection:
        if all(isinstance(v, str) and PERCENT_PATTERN.match(v) for v in values):
            return AnalyzerType.PERCENT, ""
        return None

    @staticmethod
    def _detect_temporal(values: List[Any]) -> Detection:
        if not all(isinstance(v, str) for v in values):
            return None

        for candidate in TEMPORAL_FORMATS:
            if not all(candidate.pattern.match(v) for v in values):
                continue
            parsed = pd.to_datetime(
                pd.Series(values), format=candidate.strptime, errors="coerce", utc=True
            )
            if parsed.notna().all():
                return candidate.analyzer_type, candidate.format
            logger.debug(
                f"Values match {candidate.format} but do not parse as dates"
            )
        return None

    @staticmethod
    def _detect_geometry(values: List[Any]) -> Detection:
        if all(_is_geometry_dict(v) for v in values):
            return AnalyzerType.GEOMETRY, ""
        return None

    @staticmethod
    def _detect_geometry_from_string(values: List[Any]) -> Detection:
        if all(_is_geometry_string(v) for v in values):
            return AnalyzerType.GEOMETRY_FROM_STRING, ""
        return None

    @staticmethod
    def _detect_pair_geometry(values: List[Any]) -> Detection:
        if all(_is_coordinate_pair(v) for v in values):
            return AnalyzerType.PAIR_GEOMETRY_FROM_STRING, ""
        return None

    @staticmethod
    def _detect_array(values: List[Any]) -> Detection:
        if all(isinstance(v, (list, tuple)) for v in values):
            return AnalyzerType.ARRAY, ""
        return None

    @staticmethod
    def _detect_object(values: List[Any]) -> Detection:
        if all(isinstance(v, dict) for v in values):
            return AnalyzerType.OBJECT, ""
        return None


class ClassifierAdapter:
    """Feeds samples to a type analyzer and maps its output to field types.

    Args:
        analyzer: Object exposing ``compute_col_meta(sample, rules,
            ignored_types)``. Defaults to :class:`TypeAnalyzer`.
        config: Processor configuration providing the name rules
        on_warning: Receives diagnostics such as unsupported categories.
            Defaults to the module logger.
    """

    def __init__(
        self,
        analyzer: Optional[Any] = None,
        config: Optional[ProcessorConfig] = None,
        on_warning: Optional[Callable[[str], None]] = None,
    ):
        self.analyzer = analyzer if analyzer is not None else TypeAnalyzer()
        self.config = config or ProcessorConfig()
        self.on_warning = on_warning

    def classify(
        self,
        sample: Dict[Any, Sequence[Any]],
        rules: Optional[Iterable[NameRule]] = None,
    ) -> Dict[Any, ColumnMeta]:
        """Classify a sample, keyed by the sample's column names."""
        metadata = self.analyzer.compute_col_meta(
            sample,
            rules=self.config.name_rules if rules is None else rules,
            ignored_types=IGNORED_ANALYZER_TYPES,
        )
        result: Dict[Any, ColumnMeta] = {}
        for meta in metadata:
            # First entry wins when a classifier reports a key twice
            result.setdefault(meta.key, meta)
        return result

    def to_field_type(self, analyzer_type: Optional[str]) -> FieldType:
        return analyzer_type_to_field_type(analyzer_type, on_warning=self.on_warning)
