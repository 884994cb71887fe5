"""
Main entry point for the geotabular CLI application.
"""

import logging
import os
import sys

from rich.console import Console

from geotabular.cli import create_cli
from geotabular.common.exceptions import GeoTabularError, LoggingError
from geotabular.common.utils import error_handler, setup_global_exception_handler
from geotabular.common.utils.logging_utils import setup_logging

console = Console(stderr=True)


@error_handler(log=False, raise_error=False, console_output=True)
def init_logging() -> None:
    """
    Initialize logging for the application.

    Raises:
        LoggingError: If logging setup fails
    """
    try:
        setup_logging(
            component_name="geotabular",
            log_level=logging.DEBUG if os.environ.get("GEOTABULAR_DEBUG") == "1" else logging.WARNING,
            enable_console=True,
            enable_file=bool(os.environ.get("GEOTABULAR_LOGS")),
        )
    except Exception as e:
        raise LoggingError("Failed to initialize logging", details={"error": str(e)})


def main() -> None:
    """
    The main entry point for the geotabular application.

    Initializes logging, installs the global exception handler and runs the
    command-line interface.
    """
    try:
        init_logging()
        setup_global_exception_handler()

        cli = create_cli()
        cli(standalone_mode=True)

    except GeoTabularError as e:
        # Already reported by error_handler
        if not getattr(e, "_handled", False):
            console.print(f"[red]✗ Application error: {e.get_user_message()}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
