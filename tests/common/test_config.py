"""
Tests for the processor configuration.
"""

import pytest
from pydantic import ValidationError

from geotabular.common.config import (
    CSV_NULLS,
    NameRule,
    ProcessorConfig,
    load_processor_config,
)
from geotabular.common.exceptions import ConfigurationError
from geotabular.core.processors.field_types import AnalyzerType


def test_defaults():
    config = ProcessorConfig()

    assert config.sample_count == 50
    assert config.validation_sample_count == 10
    assert config.null_tokens == CSV_NULLS
    assert config.geojson_field_name == "_geojson"
    assert [r.data_type for r in config.name_rules] == [
        AnalyzerType.GEOMETRY,
        AnalyzerType.STRING,
    ]


def test_name_rule_matching():
    rule = NameRule(pattern="census", data_type="STRING")

    assert rule.matches("census_tract")
    assert rule.matches("us_census")
    assert not rule.matches("population")


def test_invalid_name_rule_pattern():
    with pytest.raises(ValidationError):
        NameRule(pattern="(unclosed", data_type="STRING")


def test_sample_count_must_be_positive():
    with pytest.raises(ValidationError):
        ProcessorConfig(sample_count=0)


def test_load_missing_file_returns_defaults(tmp_path):
    config = load_processor_config(tmp_path / "missing.yml")
    assert config == ProcessorConfig()


def test_load_processor_section(tmp_path):
    config_file = tmp_path / "config.yml"
    config_file.write_text(
        "processor:\n"
        "  sample_count: 5\n"
        "  name_rules:\n"
        "    - pattern: '^zip'\n"
        "      data_type: ZIPCODE\n"
    )

    config = load_processor_config(config_file)

    assert config.sample_count == 5
    assert config.name_rules[0].data_type == AnalyzerType.ZIPCODE


def test_load_from_environment(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yml"
    config_file.write_text("validation_sample_count: 3\n")
    monkeypatch.setenv("GEOTABULAR_CONFIG", str(config_file))

    assert load_processor_config().validation_sample_count == 3


def test_load_invalid_values(tmp_path):
    config_file = tmp_path / "config.yml"
    config_file.write_text("sample_count: -1\n")

    with pytest.raises(ConfigurationError):
        load_processor_config(config_file)


def test_load_non_mapping(tmp_path):
    config_file = tmp_path / "config.yml"
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ConfigurationError):
        load_processor_config(config_file)
