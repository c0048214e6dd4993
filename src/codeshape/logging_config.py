"""
Logging configuration for codeshape.

Diagnostics go to stderr through rich so that report output on stdout stays
machine-readable. Only the ``codeshape`` logger is configured; an embedding
application's root logger is left alone.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "codeshape"
LEVEL_ENV = "CODESHAPE_LOG_LEVEL"

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handlers installed by the last setup_logging call
_installed: list[logging.Handler] = []


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    override = os.environ.get(LEVEL_ENV)
    if override:
        level = logging.getLevelName(override.upper())
        if isinstance(level, int):
            return level
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the codeshape logger with a rich handler on stderr.

    Calling it again replaces the handlers from the previous call.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging (wins over verbose)
        log_file: Optional file path to append logs to

    Returns:
        Configured logger instance for codeshape

    Without either flag the level is WARNING, or CODESHAPE_LOG_LEVEL when it
    names a valid level.
    """
    level = _resolve_level(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER)

    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    _installed.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        _installed.append(file_handler)

    for handler in _installed:
        logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger below the codeshape logger.

    Args:
        name: Module name (e.g., 'codeshape.engine' or just 'engine').
              If None, returns the codeshape logger itself

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
