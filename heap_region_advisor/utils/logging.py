"""Logging configuration and setup utilities.

This module provides logging setup for CLI and programmatic use:
- Rich console handler on the package logger
- Log level configuration
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "heap_region_advisor"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a rich stderr handler to the package logger."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=True
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
