"""
Utility modules for the geotabular CLI.
"""

from .console import (
    print_success,
    print_warning,
    print_info,
    print_fields_table,
)

__all__ = [
    "print_success",
    "print_warning",
    "print_info",
    "print_fields_table",
]
