"""
Logging configuration for the generation engine.

Installs a Rich console handler on the package logger so engine warnings
(recovered filter, walker and per-file errors) are readable in a terminal.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from are.core.config import LoggingConfig

PACKAGE_LOGGER = "are"


def configure_logging(
    config: Optional[LoggingConfig] = None,
    console: Optional[Console] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        config: Logging settings (level, format). Uses defaults if None.
        console: Rich console to write to (stderr console if None)
        verbose: Force DEBUG level
        quiet: Only show errors

    Returns:
        The configured package logger
    """
    config = config or LoggingConfig()

    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(config.level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(config.format))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger
