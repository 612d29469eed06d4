"""
Logging Configuration
Sets up the global loguru logger for the application.
"""
import sys
from pathlib import Path

from loguru import logger


def setup_logging(level: str = "INFO", log_file: Path | str | None = None) -> None:
    """
    Configures loguru sinks for nbclassifier.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO")
        log_file: Optional path to also write logs to, rotated daily.
    """
    # Drop the default sink so repeated calls don't duplicate output
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format="{time:HH:mm:ss} | {level: <8} | {name} - {message}",
    )

    if log_file:
        logger.add(
            str(log_file),
            level=level,
            rotation="1 day",
            retention="30 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} - {message}",
            enqueue=True,
        )

    logger.debug("Logging initialized.")
