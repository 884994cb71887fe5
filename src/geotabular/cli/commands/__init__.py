"""
Command modules for the geotabular CLI.
"""

import click

from .process import export_command, ingest_command, reconcile_command


def create_cli() -> click.Group:
    """Create and configure the main CLI group with all commands.

    Registered commands:
        - `ingest`: Normalizes a CSV, row-object or GeoJSON file.
        - `reconcile`: Re-validates saved field metadata against its rows.
        - `export`: Writes a normalized dataset back to CSV.

    Returns:
        click.Group: The root command group for the geotabular CLI.
    """

    @click.group()
    @click.version_option(package_name="geotabular")
    def cli():
        """Normalize tabular and GeoJSON data into typed fields and rows."""
        pass

    cli.add_command(ingest_command)
    cli.add_command(reconcile_command)
    cli.add_command(export_command)

    return cli
