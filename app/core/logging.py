"""
Logging setup - one console handler for every familyhub.* logger.

Modules create their own named loggers (e.g. "familyhub.services.ical_cache")
and never configure handlers themselves; main.py calls configure_logging()
once at startup.
"""

import logging
import sys


LOGGER_ROOT = "familyhub"

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stdout handler to the familyhub logger tree.

    Safe to call more than once (the handler is only added the first time).

    Args:
        level: Level name such as "DEBUG" or "INFO"; unknown names fall back to INFO

    Returns:
        The configured "familyhub" root logger
    """
    logger = logging.getLogger(LOGGER_ROOT)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
