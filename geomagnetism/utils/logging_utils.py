"""Logging configuration for the command-line entry point."""

from __future__ import annotations

import logging

__all__ = ["LOG_DATEFMT", "LOG_FORMAT", "setup_logging"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the root logger with a consistent format.

    Args:
        verbose: Use DEBUG level (model loading details, per-call flags).
        quiet: Only report warnings and errors. Ignored when ``verbose`` is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
