"""
Logging configuration for clusterbench.

Benchmarks run for a long time; rich formatting keeps the per-repository
progress readable in a terminal. Verbosity follows ``BenchmarkSettings``:
``quiet`` shows errors only, ``normal`` one line per repository and
``verbose`` one line per algorithm run.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "clusterbench"

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route clusterbench logs to a rich stderr handler, and optionally a file.

    Args:
        verbosity: One of ``quiet``, ``normal`` or ``verbose``
        log_file: Optional file path; records are appended in plain text

    Returns:
        The clusterbench root logger
    """
    level = LEVELS.get(verbosity, logging.INFO)
    verbose = level == logging.DEBUG

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(threadName)s %(name)s %(levelname)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the clusterbench namespace.

    Args:
        name: Module name (e.g., 'clusterbench.benchmarking.harness');
              names outside the namespace are prefixed with it

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
