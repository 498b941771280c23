"""
Centralized logging configuration.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the package logger hierarchy.

    Args:
        level: Level name such as "DEBUG" or "info"; unknown names fall back to INFO
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("contextual_retrieval")
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    logger.addHandler(handler)
