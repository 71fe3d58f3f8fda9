"""Logging configuration for the application."""

import logging
import os
import sys

# Get log level from environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
log_level_int = getattr(logging, log_level, logging.INFO)


def configure_logging(level: int = log_level_int) -> None:
    """Send log records to stdout with a timestamped format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


configure_logging()

logger = logging.getLogger(__name__)
