"""Logging configuration for GemBump.

Library modules log under the ``core`` namespace and never print; the CLI
calls :func:`setup_logging` once to route those records to the terminal.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import DEFAULT_LOG_LEVEL, parse_log_level

ROOT_LOGGER = "core"


def setup_logging(level: str = DEFAULT_LOG_LEVEL, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the GemBump logger.

    Args:
        level: Log level name, normally Settings.log_level. Defaults to INFO.
        console: Console to render into. Defaults to a fresh stdout console.

    Returns:
        The root GemBump logger.

    Raises:
        ConfigError: If the level name is unknown
    """
    log_level = parse_log_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(),
        show_time=False,
        show_level=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    return logger
