"""Logger setup for the ``affected_tests`` package.

Diagnostics always go to stderr: stdout carries the affected file list, which
``--format paths`` and ``--format json`` consumers read verbatim.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "affected_tests"


def log_level(verbose: bool = False, quiet: bool = False) -> int:
    """``--quiet`` wins over ``--verbose``; the default shows warnings only."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Attach a stderr RichHandler to the package logger and return it.

    Library users who never call this keep whatever handlers they configured;
    only the ``affected_tests`` logger is touched, not the root logger.
    """
    level = log_level(verbose, quiet)
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        # file paths may contain [brackets]
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child of the package logger; bare module names are prefixed."""
    if name is None:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
