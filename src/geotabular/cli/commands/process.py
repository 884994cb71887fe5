"""
Commands turning input files into normalized datasets and back.
"""

import json
from pathlib import Path
from typing import Any, Optional, Tuple

import click

from geotabular.common.config import ProcessorConfig, load_processor_config
from geotabular.common.exceptions import FileReadError, FileWriteError
from geotabular.common.utils import error_handler
from geotabular.core.processors.processor import (
    DATASET_HANDLERS,
    detect_dataset_format,
    format_csv,
    process_dataset,
)
from geotabular.core.processors.reconciler import validate_input_data
from geotabular.core.processors.schema import Dataset
from ..utils.console import print_fields_table, print_info, print_success, print_warning

DELIMITED_SUFFIXES = (".csv", ".txt")


def read_input(path: str, dataset_format: str = "auto") -> Tuple[Any, str]:
    """Read an input file and return its content with the format to use.

    Delimited files are returned as text, everything else is decoded as JSON.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, "Failed to read input file", details={"error": str(e)})

    if dataset_format == "auto" and Path(path).suffix.lower() in DELIMITED_SUFFIXES:
        dataset_format = "csv"
    if dataset_format == "csv":
        return text, dataset_format

    try:
        raw = json.loads(text)
    except ValueError as e:
        raise FileReadError(path, "Input file is not valid JSON", details={"error": str(e)})

    if dataset_format == "auto":
        dataset_format = detect_dataset_format(raw)
    return raw, dataset_format


def write_output(content: str, output: Optional[str]) -> None:
    """Write content to ``output``, or to stdout when no path is given."""
    if not output:
        click.echo(content)
        return
    try:
        Path(output).write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileWriteError(output, "Failed to write output file", details={"error": str(e)})
    print_success(f"Written to {output}")


def _load_config(config_path: Optional[str], sample_count: Optional[int]) -> ProcessorConfig:
    config = load_processor_config(config_path)
    if sample_count is not None:
        config = config.model_copy(update={"sample_count": sample_count})
    return config


@click.command(name="ingest")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "dataset_format",
    type=click.Choice(["auto", *DATASET_HANDLERS]),
    default="auto",
    show_default=True,
    help="Input format; auto picks it from the file extension and content.",
)
@click.option(
    "--sample-count",
    type=click.IntRange(min=1),
    help="Number of values sampled per column for type detection.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="YAML file with processor settings.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output JSON file.")
@error_handler(log=True, raise_error=True)
def ingest_command(
    path: str,
    dataset_format: str,
    sample_count: Optional[int],
    config_path: Optional[str],
    output: Optional[str],
) -> None:
    """
    Normalize a CSV, row-object JSON or GeoJSON file into typed fields and rows.

    Examples:
        geotabular ingest trips.csv
        geotabular ingest stations.geojson -o stations.json
    """
    config = _load_config(config_path, sample_count)
    raw, dataset_format = read_input(path, dataset_format)
    print_info(f"Processing {path} as {dataset_format}")

    dataset = process_dataset(raw, dataset_format, config=config)
    if not dataset or not dataset.rows:
        print_warning(f"No rows found in {path}")
        dataset = dataset or Dataset()
    print_fields_table(f"{len(dataset.rows)} rows", dataset.fields)
    write_output(json.dumps(dataset.to_dict()), output)


@click.command(name="reconcile")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="YAML file with processor settings.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output JSON file.")
@error_handler(log=True, raise_error=True)
def reconcile_command(path: str, config_path: Optional[str], output: Optional[str]) -> None:
    """
    Check saved field metadata against its rows and infer it again if needed.
    """
    config = _load_config(config_path, None)
    raw, _ = read_input(path, "json")
    dataset = validate_input_data(raw, config=config)
    print_fields_table(f"{len(dataset.rows)} rows", dataset.fields)
    write_output(json.dumps(dataset.to_dict()), output)


@click.command(name="export")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output CSV file.")
@error_handler(log=True, raise_error=True)
def export_command(path: str, output: Optional[str]) -> None:
    """
    Export a normalized JSON dataset to CSV.
    """
    raw, _ = read_input(path, "json")
    dataset = validate_input_data(raw)
    write_output(format_csv(dataset, dataset.fields), output)
