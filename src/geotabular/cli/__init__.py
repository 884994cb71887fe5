"""
Main CLI package for geotabular.
"""

from .commands import create_cli

cli = create_cli()

__all__ = ["cli", "create_cli"]
