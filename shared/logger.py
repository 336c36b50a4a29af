"""Logging setup shared by all tools."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(message)s"

_stderr_console = Console(stderr=True)


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root ``formatbridge`` logging handler and return a named logger.

    Args:
        name: Logger name (usually ``__name__`` of the calling CLI)
        level: Log level name; falls back to ``LOG_LEVEL`` env var, then INFO

    Returns:
        Configured logger
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(
            console=_stderr_console,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt="[%X]"))
        root.addHandler(handler)

    root.setLevel(numeric_level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger. Handlers are attached by ``setup_logger``."""
    return logging.getLogger(name)
