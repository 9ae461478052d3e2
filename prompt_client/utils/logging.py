"""
Logging configuration for the prompt gallery client.

Console logging through loguru; tracebacks are only expanded in debug mode.
"""

import sys
from typing import Optional

from loguru import logger

from ..config import get_settings


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()

    logger.remove()

    level = (log_level or settings.log_level).upper()

    format_string = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    # stderr keeps log lines out of CLI output
    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode,
    )

    logger.debug(f"Logging initialized with level: {level}")
