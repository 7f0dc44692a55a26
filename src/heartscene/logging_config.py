"""Handlers for the ``heartscene`` logger tree.

Modules log through ``logging.getLogger(__name__)``; only the entry point
calls ``setup_logging``.
"""
import logging
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Send ``heartscene.*`` records to stdout, and to ``log_file`` when given.

    Calling it again replaces the previous handlers.
    """
    logger = logging.getLogger("heartscene")
    logger.setLevel(level)

    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s", ", ".join(type(h).__name__ for h in handlers))
    return logger
