"""
Logging setup for the memory book app.

Streamlit reruns the page script on every interaction, so ``setup_logging``
replaces loguru's handlers each time instead of stacking new ones.
"""

import sys
from typing import Optional

from loguru import logger

from ..config import get_settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> "
    "<cyan>{name}.{function}</cyan> | <level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{function}:{line} | {message}"


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure loguru for the app.

    Args:
        log_level: Override for ``settings.log_level``
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    as_json = settings.log_format == "json"

    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=not as_json,
        serialize=as_json,
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode
    )

    # File output only outside debug mode
    if not settings.debug_mode and settings.log_file:
        logger.add(
            settings.log_file,
            format=FILE_FORMAT,
            level=level,
            serialize=as_json,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            compression="gz"
        )

    logger.debug(f"Logging configured: level={level} format={settings.log_format} file={settings.log_file or '-'}")
