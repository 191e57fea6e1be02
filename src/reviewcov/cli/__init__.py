"""Command line interface for reviewcov."""

from reviewcov.cli.exit_codes import EXIT_CANTCREAT, EXIT_DATAERR, EXIT_GENERIC, EXIT_NOINPUT, EXIT_OK, EXIT_USAGE
from reviewcov.cli.root import cli, create_app, main

__all__ = [
    "EXIT_CANTCREAT",
    "EXIT_DATAERR",
    "EXIT_GENERIC",
    "EXIT_NOINPUT",
    "EXIT_OK",
    "EXIT_USAGE",
    "cli",
    "create_app",
    "main",
]
