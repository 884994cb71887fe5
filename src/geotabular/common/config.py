"""Pydantic models for processor configuration.

The defaults reproduce the behaviour of the ingestion pipeline out of the
box; a YAML file can override any of them, either at the document root or
under a ``processor:`` key.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from geotabular.common.exceptions import ConfigurationError
from geotabular.common.utils import error_handler
from geotabular.core.processors.field_types import AnalyzerType

# Null-like tokens found in delimited text
CSV_NULLS = ["", "null", "NULL", "Null", "NaN", "/N"]


class NameRule(BaseModel):
    """Force a classifier type on columns whose name matches ``pattern``."""

    pattern: str
    data_type: AnalyzerType

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid name rule pattern '{value}': {exc}") from exc
        return value

    def matches(self, name: str) -> bool:
        return re.search(self.pattern, str(name)) is not None


def _default_name_rules() -> List[NameRule]:
    return [
        NameRule(pattern="geojson|all_points", data_type=AnalyzerType.GEOMETRY),
        NameRule(pattern="census", data_type=AnalyzerType.STRING),
    ]


class ProcessorConfig(BaseModel):
    """Settings shared by the ingestion entry points and the reconciler."""

    sample_count: int = Field(default=50, ge=1)
    validation_sample_count: int = Field(default=10, ge=1)
    null_tokens: List[str] = Field(default_factory=lambda: list(CSV_NULLS))
    geojson_field_name: str = "_geojson"
    name_rules: List[NameRule] = Field(default_factory=_default_name_rules)


@error_handler(log=True, raise_error=True, console_output=False)
def load_processor_config(
    path: Optional[Union[str, Path]] = None,
) -> ProcessorConfig:
    """Load a ProcessorConfig from a YAML file.

    Args:
        path: YAML file to read. Falls back to ``GEOTABULAR_CONFIG`` and then
            to the built-in defaults when no file is available.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file cannot be parsed or fails validation
    """
    config_path = path or os.environ.get("GEOTABULAR_CONFIG")
    if not config_path or not os.path.exists(config_path):
        return ProcessorConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            config_key="processor",
            message="Failed to parse configuration file",
            details={"file": str(config_path), "error": str(e)},
        )

    if not isinstance(raw, dict):
        raise ConfigurationError(
            config_key="processor",
            message="Configuration file must contain a mapping",
            details={"file": str(config_path)},
        )

    section: Dict[str, Any] = raw.get("processor") or raw
    try:
        return ProcessorConfig(**section)
    except ValidationError as e:
        raise ConfigurationError(
            config_key="processor",
            message="Invalid processor configuration",
            details={"file": str(config_path), "error": str(e)},
        )
