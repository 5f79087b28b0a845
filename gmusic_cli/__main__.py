"""
Main entry point for the gmusic-cli application.
"""

import logging
import sys

from rich.console import Console

from gmusic_cli.cli.app import app
from gmusic_cli.cli.formatters import format_error_with_suggestions


def main() -> None:
    """Runs the CLI, turning unexpected errors into a panel and exit code 1."""
    try:
        app()
    except Exception as e:
        Console().print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        logging.getLogger("gmusic_cli").debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
