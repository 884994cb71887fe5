"""
Console output utilities for the geotabular CLI.

Messages go to stderr so that data written to stdout stays machine readable.
"""

import os
from typing import List, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


def _should_use_emojis() -> bool:
    """Emojis are on unless GEOTABULAR_USE_EMOJIS disables them."""
    return os.getenv("GEOTABULAR_USE_EMOJIS", "1").lower() not in ("0", "false", "no", "off")


USE_EMOJIS = _should_use_emojis()


def print_success(message: str, icon: bool = True) -> None:
    """Print a success message in green."""
    if not message or not message.strip():
        return
    prefix = ("✅ " if USE_EMOJIS else "[✓] ") if icon else ""
    console.print(f"{prefix}{message}", style="green")


def print_warning(message: str, icon: bool = True) -> None:
    """Print a warning message in yellow."""
    if not message or not message.strip():
        return
    prefix = ("⚠️  " if USE_EMOJIS else "[!] ") if icon else ""
    console.print(f"{prefix}{message}", style="yellow")


def print_info(message: str, icon: bool = True) -> None:
    """Print an info message in blue."""
    if not message or not message.strip():
        return
    prefix = ("ℹ️  " if USE_EMOJIS else "[i] ") if icon else ""
    console.print(f"{prefix}{message}", style="blue")


def print_fields_table(title: str, fields: Sequence) -> None:
    """Print one line per field: index, name, type, format, analyzer type."""
    table = Table(title=title, box=box.ROUNDED)
    for column in ("#", "Name", "Type", "Format", "Analyzer type"):
        table.add_column(column)

    rows: List[List[str]] = [
        [
            str(f.field_idx),
            str(f.name),
            f.type.value,
            f.format or "",
            f.analyzer_type or "",
        ]
        for f in fields
    ]
    for row in rows:
        table.add_row(*row)
    console.print(table)
