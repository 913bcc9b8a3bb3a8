"""Logging setup for the command line interface."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "reposentry"


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Route RepoSentry log records through a rich handler.

    Args:
        verbose: Show debug records (default shows warnings and errors only)
        console: Console to log to (default: stderr)

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
