"""
Logging setup for applications embedding the Iterate client.

The library itself only creates module loggers; call ``setup_logging``
from the host application to get console output.
"""

import logging
import sys
from typing import Optional

from .config import config


CONSOLE_HANDLER_NAME = "iterate_client.console"


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """Set up console logging for the client package."""
    level = getattr(logging, (log_level or config.log.log_level).upper())

    logger = logging.getLogger(config.log.logger_name)
    logger.setLevel(level)

    # Avoid stacking handlers when called more than once
    for handler in list(logger.handlers):
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        config.log.log_format,
        datefmt=config.log.date_format
    ))
    console_handler.set_name(CONSOLE_HANDLER_NAME)

    logger.addHandler(console_handler)

    return logger
