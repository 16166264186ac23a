"""Logging helpers with rich console output.

Library modules call ``get_logger(__name__)``; the CLI calls
``setup_logging`` once at start-up.

Usage:
    from memosync.log import get_logger

    logger = get_logger(__name__)
    logger.debug("Parsed %d entries", len(entries))
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# stderr so command output on stdout stays machine-readable
console = Console(stderr=True)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger.

    Handlers live on the root logger (see ``setup_logging``); module loggers
    only propagate, so pytest's caplog sees every record.
    """
    return logging.getLogger(name)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger for the whole application.

    Args:
        level: Default logging level for all modules
        log_file: Optional file path to also log to a file

    The ``LOG_LEVEL`` environment variable overrides ``level``.
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(rich_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)
