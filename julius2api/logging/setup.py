"""Logging configuration for the relay."""

import logging
import sys

LOGGER_NAME = "julius2api"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up logging with proper handlers and formatters."""
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logger.setLevel(numeric_level)

    # Clear any existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # Propagate to the root logger so pytest's caplog and uvicorn see records
    logger.propagate = True

    return logger
